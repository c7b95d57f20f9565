from __future__ import annotations

import logging

from ...lib.pkg import apt_install, apt_update
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallPrerequisitesStep:
    step_id = "10_install_prerequisites"
    description = "Updating system and installing prerequisites…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        apt_update(dry_run=ctx.dry_run)
        apt_install(ctx.config.prerequisites, dry_run=ctx.dry_run)
        return StepStatus.RAN
