from __future__ import annotations

import logging
import pwd
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TargetUser:
    name: str
    uid: int
    gid: int
    home: Path
    shell: str = ""


def invoking_user(environ: Mapping[str, str]) -> str:
    """The human behind the process: SUDO_USER, then USER, then root."""

    return environ.get("SUDO_USER") or environ.get("USER") or "root"


def resolve_user(name: str) -> TargetUser:
    try:
        pw = pwd.getpwnam(name)
    except KeyError as e:
        raise LookupError(f"Unknown user: {name}") from e
    return TargetUser(
        name=pw.pw_name,
        uid=pw.pw_uid,
        gid=pw.pw_gid,
        home=Path(pw.pw_dir),
        shell=pw.pw_shell,
    )
