from __future__ import annotations

import logging
from typing import Sequence

from .command import privileged, run_cmd

logger = logging.getLogger(__name__)

APT_ENV = {"DEBIAN_FRONTEND": "noninteractive"}


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(privileged(["apt-get", "update", "-y"]), env=APT_ENV, dry_run=dry_run)


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    run_cmd(
        privileged(["apt-get", "install", "-y", *packages]),
        env=APT_ENV,
        dry_run=dry_run,
    )


def apt_mark_hold(packages: Sequence[str], *, dry_run: bool = False) -> None:
    """Pin packages so unattended upgrades cannot move them."""
    if not packages:
        return
    run_cmd(privileged(["apt-mark", "hold", *packages]), dry_run=dry_run)
