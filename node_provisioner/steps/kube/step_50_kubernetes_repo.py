from __future__ import annotations

import logging

from ...lib.apt_repo import (
    install_signing_key,
    kubernetes_release_key_url,
    kubernetes_repo_url,
    render_sources_list,
)
from ...lib.files import write_file
from ...lib.pkg import apt_update
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class KubernetesRepoStep:
    step_id = "50_kubernetes_repo"
    description = "Adding Kubernetes apt repo…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        cfg = ctx.config
        repo_url = kubernetes_repo_url(cfg.k8s_version)
        logger.info("Using Kubernetes apt repo v%s", cfg.k8s_version)

        install_signing_key(kubernetes_release_key_url(cfg.k8s_version), cfg.apt_keyring, dry_run=ctx.dry_run)
        # signed-by must name the key as apt sees it on the host, not under a relocated root.
        keyring = "/" + str(cfg.apt_keyring.relative_to(cfg.root))
        write_file(cfg.apt_sources_list, render_sources_list(repo_url, keyring), dry_run=ctx.dry_run)
        apt_update(dry_run=ctx.dry_run)

        ctx.decisions["kubernetes_repo"] = repo_url
        return StepStatus.RAN
