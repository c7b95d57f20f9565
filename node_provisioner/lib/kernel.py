from __future__ import annotations

import logging
from typing import Mapping, Sequence

from .command import privileged, run_cmd

logger = logging.getLogger(__name__)


def render_modules_load(modules: Sequence[str]) -> str:
    return "".join(f"{m}\n" for m in modules)


def render_sysctl(params: Mapping[str, str]) -> str:
    if not params:
        return ""
    width = max(len(k) for k in params)
    return "".join(f"{k.ljust(width)} = {v}\n" for k, v in params.items())


def load_modules(modules: Sequence[str], *, dry_run: bool = False) -> None:
    for m in modules:
        run_cmd(privileged(["modprobe", m]), dry_run=dry_run)


def apply_sysctl(*, dry_run: bool = False) -> None:
    run_cmd(privileged(["sysctl", "--system"]), dry_run=dry_run)
