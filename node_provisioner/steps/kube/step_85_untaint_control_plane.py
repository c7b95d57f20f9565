from __future__ import annotations

import logging

from ...lib.command import as_user, run_cmd
from ...pipeline import RunContext, StepStatus

logger = logging.getLogger(__name__)

CONTROL_PLANE_TAINT = "node-role.kubernetes.io/control-plane-"


class UntaintControlPlaneStep:
    """Allow regular workloads on the single node."""

    step_id = "85_untaint_control_plane"
    description = "Allowing scheduling on the control-plane…"
    # Fails when the taint is already gone.
    best_effort = True

    def run(self, ctx: RunContext) -> StepStatus:
        run_cmd(
            as_user(ctx.user.name, ["kubectl", "taint", "nodes", "--all", CONTROL_PLANE_TAINT]),
            dry_run=ctx.dry_run,
        )
        return StepStatus.RAN
