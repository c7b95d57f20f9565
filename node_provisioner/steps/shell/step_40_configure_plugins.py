from __future__ import annotations

import logging
import os

from ...lib.command import is_root
from ...lib.files import write_file
from ...lib.zshrc import set_plugins
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class ConfigurePluginsStep:
    step_id = "40_configure_plugins"
    description = "Configuring .zshrc..."
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        zshrc = ctx.user.home / ".zshrc"
        existing = zshrc.read_text(encoding="utf-8") if zshrc.exists() else ""

        text, changed = set_plugins(existing, ctx.config.enabled_plugins)
        if not changed:
            logger.info("%s already enables all plugins", str(zshrc))
            return StepStatus.SKIPPED

        write_file(zshrc, text, dry_run=ctx.dry_run)
        if is_root() and not ctx.dry_run:
            os.chown(zshrc, ctx.user.uid, ctx.user.gid)
        ctx.decisions["plugins"] = list(ctx.config.enabled_plugins)
        return StepStatus.RAN
