from __future__ import annotations

import logging

from ...lib.command import as_user, run_cmd
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallCniStep:
    step_id = "80_install_cni"
    description = "Installing Flannel CNI…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        manifest = ctx.config.cni_manifest
        run_cmd(as_user(ctx.user.name, ["kubectl", "apply", "-f", manifest]), dry_run=ctx.dry_run)
        ctx.decisions["cni_manifest"] = manifest
        return StepStatus.RAN
