from __future__ import annotations

import logging

from ...lib.files import write_file
from ...lib.kernel import load_modules, render_modules_load
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class KernelModulesStep:
    step_id = "30_kernel_modules"
    description = "Configuring kernel modules…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        cfg = ctx.config
        write_file(cfg.modules_load_conf, render_modules_load(cfg.kernel_modules), dry_run=ctx.dry_run)
        load_modules(cfg.kernel_modules, dry_run=ctx.dry_run)
        return StepStatus.RAN
