from __future__ import annotations

import logging

from ...lib.files import write_file
from ...lib.kernel import apply_sysctl, render_sysctl
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class SysctlStep:
    step_id = "35_sysctl"
    description = "Configuring sysctl…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        cfg = ctx.config
        write_file(cfg.sysctl_conf, render_sysctl(cfg.sysctl), dry_run=ctx.dry_run)
        apply_sysctl(dry_run=ctx.dry_run)
        return StepStatus.RAN
