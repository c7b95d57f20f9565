from __future__ import annotations

import logging

from ...lib.pkg import apt_install, apt_mark_hold
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallKubernetesStep:
    step_id = "55_install_kubernetes"
    description = "Installing kubeadm, kubelet, kubectl…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        packages = ctx.config.kube_packages
        apt_install(packages, dry_run=ctx.dry_run)
        apt_mark_hold(packages, dry_run=ctx.dry_run)
        return StepStatus.RAN
