from __future__ import annotations

import logging

from ...lib.command import as_user, run_cmd
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallPluginsStep:
    step_id = "30_install_plugins"
    description = "Installing ZSH plugins..."
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        plugins_dir = ctx.config.custom_dir(ctx.user.home) / "plugins"
        cloned = []

        for plugin in ctx.config.plugins:
            dest = plugins_dir / plugin.name
            if dest.exists():
                logger.info("Plugin %s already present at %s", plugin.name, str(dest))
                continue

            argv = ["git", "clone"]
            if plugin.depth:
                argv += ["--depth", str(plugin.depth)]
            argv += ["--", plugin.url, str(dest)]
            run_cmd(as_user(ctx.user.name, argv), dry_run=ctx.dry_run)
            cloned.append(plugin.name)

        ctx.decisions["plugins_cloned"] = cloned
        return StepStatus.RAN if cloned else StepStatus.SKIPPED
