from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def write_file(path: Path, contents: str, *, mode: int | None = None, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would write %s", str(path))
        return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(contents, encoding="utf-8")
    if mode is not None:
        os.chmod(path, mode)
    logger.debug("Wrote %s (%d bytes)", str(path), len(contents.encode("utf-8")))


def copy_file(src: Path, dst: Path, *, dry_run: bool = False) -> None:
    if dry_run:
        logger.info("Would copy %s -> %s", str(src), str(dst))
        return
    if not src.exists():
        raise FileNotFoundError(str(src))
    dst.parent.mkdir(parents=True, exist_ok=True)
    # copies permission bits too; admin.conf is 0600 and must stay that way
    shutil.copy(src, dst)


def chown_tree(path: Path, uid: int, gid: int, *, dry_run: bool = False) -> None:
    """chown -R equivalent; symlinks are not followed."""

    if dry_run:
        logger.info("Would chown -R %s:%s %s", uid, gid, str(path))
        return
    os.chown(path, uid, gid, follow_symlinks=False)
    if path.is_dir() and not path.is_symlink():
        for item in path.rglob("*"):
            os.chown(item, uid, gid, follow_symlinks=False)


def ensure_line(path: Path, line: str, *, dry_run: bool = False) -> bool:
    """Append line to path unless an identical line already exists.

    Returns True when the file was (or would be) changed.
    """

    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    if any(l.strip() == line.strip() for l in existing.splitlines()):
        return False

    if existing and not existing.endswith("\n"):
        existing += "\n"
    write_file(path, existing + line + "\n", dry_run=dry_run)
    return True
