from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from .command import privileged, run_cmd

logger = logging.getLogger(__name__)

K8S_PKGS_BASE = "https://pkgs.k8s.io/core:/stable:"


def kubernetes_repo_url(version: str) -> str:
    """Return the pkgs.k8s.io deb repo for a Kubernetes minor version (e.g. "1.34")."""
    return f"{K8S_PKGS_BASE}/v{version}/deb/"


def kubernetes_release_key_url(version: str) -> str:
    return kubernetes_repo_url(version) + "Release.key"


def render_sources_list(repo_url: str, keyring: str) -> str:
    """A flat-repo sources line (suite "/", no components)."""
    return f"deb [signed-by={keyring}] {repo_url} /\n"


def install_signing_key(url: str, keyring: Path, *, dry_run: bool = False) -> None:
    """Download an armored key and dearmor it into keyring.

    Equivalent of `curl -fsSL URL | gpg --dearmor -o KEYRING`, with the key
    staged in a temp file so gpg reads bytes rather than piped text.
    """

    if not dry_run:
        keyring.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(prefix="node-provisioner-") as tmp:
        armored = Path(tmp) / "Release.key"
        run_cmd(["curl", "-fsSL", "-o", str(armored), url], dry_run=dry_run)
        run_cmd(
            privileged(["gpg", "--batch", "--yes", "--dearmor", "-o", str(keyring), str(armored)]),
            dry_run=dry_run,
        )

    logger.info("Installed apt signing key %s", str(keyring))
