from __future__ import annotations

import logging

from ...lib.files import chown_tree, copy_file
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class ConfigureKubectlStep:
    step_id = "70_configure_kubectl"
    description = "Configuring kubectl…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        user = ctx.user
        kube_dir = user.home / ".kube"
        kubeconfig = kube_dir / "config"

        copy_file(ctx.config.admin_conf, kubeconfig, dry_run=ctx.dry_run)
        chown_tree(kube_dir, user.uid, user.gid, dry_run=ctx.dry_run)

        ctx.decisions["kubeconfig"] = str(kubeconfig)
        logger.info("kubectl configured for %s (%s)", user.name, str(kubeconfig))
        return StepStatus.RAN
