from __future__ import annotations

import logging

from ...lib.pkg import apt_install
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallZshStep:
    step_id = "10_install_zsh"
    description = "Installing ZSH and related packages..."
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        apt_install(ctx.config.packages, dry_run=ctx.dry_run)
        return StepStatus.RAN
