from __future__ import annotations

import logging
from collections.abc import MutableMapping
from dataclasses import dataclass
from typing import Any, List, Sequence

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .command import privileged, run_cmd

logger = logging.getLogger(__name__)

# Where runc options / the sandbox image live when the default config does
# not carry the key at all, keyed by config schema version.
_RUNC_OPTIONS_PATH = {
    2: ("plugins", "io.containerd.grpc.v1.cri", "containerd", "runtimes", "runc", "options"),
    3: ("plugins", "io.containerd.cri.v1.runtime", "containerd", "runtimes", "runc", "options"),
}
_SANDBOX_PATH = {
    2: ("plugins", "io.containerd.grpc.v1.cri", "sandbox_image"),
    3: ("plugins", "io.containerd.cri.v1.images", "pinned_images", "sandbox"),
}


@dataclass(frozen=True)
class PatchReport:
    systemd_cgroup_keys: int
    sandbox_keys: int
    inserted: List[str]


def default_config(*, dry_run: bool = False) -> str:
    """Return the output of `containerd config default`."""

    return run_cmd(["containerd", "config", "default"], dry_run=dry_run).stdout


def _ensure_path(doc: MutableMapping, path: Sequence[str]) -> MutableMapping:
    node = doc
    for key in path:
        if key not in node:
            node[key] = tomlkit.table()
        node = node[key]
    return node


def _walk(node: MutableMapping, *, sandbox_image: str, counts: dict) -> None:
    for key in list(node.keys()):
        value = node[key]
        if key == "SystemdCgroup":
            node[key] = True
            counts["cgroup"] += 1
        elif key == "sandbox_image":
            node[key] = sandbox_image
            counts["sandbox"] += 1
        elif key == "pinned_images" and isinstance(value, MutableMapping) and "sandbox" in value:
            value["sandbox"] = sandbox_image
            counts["sandbox"] += 1
        elif isinstance(value, MutableMapping):
            _walk(value, sandbox_image=sandbox_image, counts=counts)


def patch_config(text: str, *, sandbox_image: str) -> tuple[str, PatchReport]:
    """Switch runc to systemd cgroups and pin the sandbox (pause) image.

    The config is parsed as TOML, every `SystemdCgroup` / sandbox image key is
    rewritten in place, and missing keys are inserted at the location the
    config schema version expects. Comments and ordering are preserved.
    """

    try:
        doc = tomlkit.parse(text)
    except TOMLKitError as e:
        raise ValueError(f"containerd config is not valid TOML: {e}") from e

    version = int(doc.get("version", 2))
    if version not in _RUNC_OPTIONS_PATH:
        raise ValueError(f"Unsupported containerd config version: {version}")

    counts = {"cgroup": 0, "sandbox": 0}
    _walk(doc, sandbox_image=sandbox_image, counts=counts)

    inserted: List[str] = []
    if counts["cgroup"] == 0:
        options = _ensure_path(doc, _RUNC_OPTIONS_PATH[version])
        options["SystemdCgroup"] = True
        inserted.append(".".join(_RUNC_OPTIONS_PATH[version] + ("SystemdCgroup",)))
    if counts["sandbox"] == 0:
        *parent, leaf = _SANDBOX_PATH[version]
        _ensure_path(doc, parent)[leaf] = sandbox_image
        inserted.append(".".join(_SANDBOX_PATH[version]))

    if inserted:
        logger.debug("Inserted containerd keys: %s", ", ".join(inserted))

    report = PatchReport(
        systemd_cgroup_keys=counts["cgroup"],
        sandbox_keys=counts["sandbox"],
        inserted=inserted,
    )
    return tomlkit.dumps(doc), report


def read_setting(text: str, key: str) -> List[Any]:
    """Collect every value stored under key anywhere in a containerd config."""

    found: List[Any] = []

    def _collect(node: MutableMapping) -> None:
        for k, v in node.items():
            if k == key:
                found.append(v.unwrap() if hasattr(v, "unwrap") else v)
            if isinstance(v, MutableMapping):
                _collect(v)

    _collect(tomlkit.parse(text))
    return found


def enable_and_restart(*, dry_run: bool = False) -> None:
    run_cmd(privileged(["systemctl", "enable", "--now", "containerd"]), dry_run=dry_run)
    # enable --now leaves an already-running daemon on its old config.
    run_cmd(privileged(["systemctl", "restart", "containerd"]), dry_run=dry_run)
