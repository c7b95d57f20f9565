from __future__ import annotations

import logging

from ...lib.command import as_user, run_cmd
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallOhMyZshStep:
    step_id = "20_install_oh_my_zsh"
    description = "Installing Oh My ZSH..."
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        omz_dir = ctx.user.home / ".oh-my-zsh"
        if omz_dir.exists():
            logger.warning("Oh My Zsh already installed at %s; skipping.", str(omz_dir))
            return StepStatus.SKIPPED

        script = run_cmd(["curl", "-fsSL", ctx.config.ohmyzsh_install_url], dry_run=ctx.dry_run).stdout
        # Fed on stdin so the target user never needs to read a root-owned temp file.
        # --unattended also keeps the installer from running chsh itself.
        run_cmd(
            as_user(ctx.user.name, ["sh", "-s", "--", "--unattended"]),
            input_text=script,
            dry_run=ctx.dry_run,
        )
        ctx.decisions["oh_my_zsh"] = str(omz_dir)
        return StepStatus.RAN
