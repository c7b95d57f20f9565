from __future__ import annotations

import logging
import os

from ...lib.files import ensure_line
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class KubectlAliasStep:
    step_id = "90_kubectl_alias"
    description = "Adding kubectl alias to Zsh…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        user = ctx.user
        zshrc = user.home / ".zshrc"
        line = ctx.config.alias_line

        if not ensure_line(zshrc, line, dry_run=ctx.dry_run):
            logger.debug("%r already present in %s", line, str(zshrc))
            return StepStatus.SKIPPED

        logger.info("Added %r to %s", line, str(zshrc))
        if not ctx.dry_run:
            os.chown(zshrc, user.uid, user.gid)
        return StepStatus.RAN
