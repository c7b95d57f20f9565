from __future__ import annotations

import logging

from ...lib import containerd
from ...lib.files import write_file
from ...lib.pkg import apt_install
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)


class InstallContainerdStep:
    step_id = "40_install_containerd"
    description = "Installing containerd…"
    best_effort = False

    def run(self, ctx: RunContext) -> StepStatus:
        cfg = ctx.config
        apt_install(["containerd"], dry_run=ctx.dry_run)

        text, report = containerd.patch_config(
            containerd.default_config(dry_run=ctx.dry_run),
            sandbox_image=cfg.sandbox_image,
        )
        write_file(cfg.containerd_config, text, dry_run=ctx.dry_run)
        logger.debug(
            "containerd config: SystemdCgroup keys=%d sandbox keys=%d inserted=%s",
            report.systemd_cgroup_keys,
            report.sandbox_keys,
            report.inserted,
        )

        containerd.enable_and_restart(dry_run=ctx.dry_run)
        ctx.decisions["sandbox_image"] = cfg.sandbox_image
        return StepStatus.RAN
