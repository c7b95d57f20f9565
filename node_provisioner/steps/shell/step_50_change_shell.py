from __future__ import annotations

import logging
import shutil

from ...lib.command import privileged, run_cmd
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class ChangeShellStep:
    step_id = "50_change_shell"
    description = "Changing default shell to ZSH..."
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        zsh = shutil.which("zsh")
        if zsh is None:
            if not ctx.dry_run:
                raise RuntimeError("zsh not found on PATH")
            zsh = "/usr/bin/zsh"

        if ctx.user.shell == zsh:
            logger.info("%s already uses %s", ctx.user.name, zsh)
            return StepStatus.SKIPPED

        # chsh run as a plain user prompts for a password on a pipe we never feed
        run_cmd(privileged(["chsh", "-s", zsh, ctx.user.name]), dry_run=ctx.dry_run)
        ctx.decisions["login_shell"] = zsh
        return StepStatus.RAN
