from __future__ import annotations

import logging

from ...lib.command import privileged, run_cmd
from ...lib.files import write_file
from ...lib.fstab import disable_swap_entries
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class DisableSwapStep:
    step_id = "20_disable_swap"
    description = "Disabling swap…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        cfg = ctx.config
        run_cmd(privileged(["swapoff", "-a"]), dry_run=ctx.dry_run)

        # kubelet refuses to start with swap on, so keep it off across reboots.
        if not cfg.fstab.exists():
            logger.warning("%s not found; nothing to persist", str(cfg.fstab))
            return StepStatus.RAN

        text, disabled = disable_swap_entries(cfg.fstab.read_text(encoding="utf-8"))
        if disabled:
            write_file(cfg.fstab, text, dry_run=ctx.dry_run)
        ctx.decisions["swap_entries_disabled"] = disabled
        logger.debug("Commented out %d swap entries in %s", disabled, str(cfg.fstab))
        return StepStatus.RAN
