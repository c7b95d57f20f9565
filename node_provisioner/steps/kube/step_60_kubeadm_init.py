from __future__ import annotations

import logging

from ...lib.command import privileged, run_cmd
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class KubeadmInitStep:
    step_id = "60_kubeadm_init"
    description = "Running kubeadm init…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        cfg = ctx.config
        if cfg.admin_conf.exists():
            logger.warning("Kubernetes already initialized; skipping kubeadm init.")
            ctx.decisions["kubeadm_init"] = "skipped"
            return StepStatus.SKIPPED

        logger.info("Initializing control-plane with pod CIDR %s", cfg.pod_cidr)
        run_cmd(
            privileged(
                [
                    "kubeadm",
                    "init",
                    f"--pod-network-cidr={cfg.pod_cidr}",
                    "--cri-socket",
                    cfg.cri_socket,
                ]
            ),
            dry_run=ctx.dry_run,
        )
        ctx.decisions["kubeadm_init"] = "ran"
        return StepStatus.RAN
