from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FstabEntry:
    spec: str
    mountpoint: str
    fstype: str
    options: str = "defaults"
    dump: int = 0
    passno: int = 0
    commented: bool = False
    # original line text; unchanged entries are written back exactly as read
    raw: Optional[str] = field(default=None, compare=False)

    @property
    def is_swap(self) -> bool:
        return self.fstype == "swap"

    def render(self) -> str:
        if self.raw is not None:
            return self.raw
        line = f"{self.spec}\t{self.mountpoint}\t{self.fstype}\t{self.options}\t{self.dump}\t{self.passno}"
        return ("#" + line) if self.commented else line


# Lines we do not understand (blank lines, comments, malformed entries) are
# kept verbatim as plain strings.
FstabLine = Union[FstabEntry, str]


def _parse_entry(text: str, *, commented: bool, raw: Optional[str] = None) -> Optional[FstabEntry]:
    fields = text.split()
    if len(fields) < 3:
        return None
    try:
        dump = int(fields[4]) if len(fields) > 4 else 0
        passno = int(fields[5]) if len(fields) > 5 else 0
    except ValueError:
        return None
    return FstabEntry(
        spec=fields[0],
        mountpoint=fields[1],
        fstype=fields[2],
        options=fields[3] if len(fields) > 3 else "defaults",
        dump=dump,
        passno=passno,
        commented=commented,
        raw=raw,
    )


def parse_fstab(text: str) -> List[FstabLine]:
    lines: List[FstabLine] = []
    for raw in text.splitlines():
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            lines.append(raw)
            continue
        entry = _parse_entry(stripped, commented=False, raw=raw)
        lines.append(entry if entry is not None else raw)
    return lines


def render_fstab(lines: List[FstabLine]) -> str:
    out = [l.render() if isinstance(l, FstabEntry) else l for l in lines]
    return "\n".join(out) + "\n"


def disable_swap_entries(text: str) -> tuple[str, int]:
    """Comment out every active swap entry.

    Returns the new fstab text and the number of entries disabled. Entries
    that are already commented are left alone, so this is idempotent.
    """

    lines = parse_fstab(text)
    disabled = 0
    for i, line in enumerate(lines):
        if isinstance(line, FstabEntry) and line.is_swap and not line.commented:
            lines[i] = replace(line, commented=True, raw="#" + (line.raw or line.render()).lstrip())
            disabled += 1
    return render_fstab(lines), disabled
