from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

_ASSIGN_RE = re.compile(r"^(?P<indent>\s*)plugins=\((?P<body>.*)$")
_SOURCE_OMZ_RE = re.compile(r"^\s*(source|\.)\s+[\"']?\$(\{ZSH\}|ZSH)/oh-my-zsh\.sh")


@dataclass(frozen=True)
class PluginAssignment:
    """The `plugins=(...)` array in a .zshrc, which may span several lines."""

    start: int
    end: int  # inclusive line index holding the closing paren
    indent: str
    plugins: List[str]


def find_plugins(lines: Sequence[str]) -> Optional[PluginAssignment]:
    for i, line in enumerate(lines):
        m = _ASSIGN_RE.match(line)
        if not m:
            continue

        body = m.group("body")
        words: List[str] = []
        j = i
        while True:
            # a ")" inside a trailing comment does not close the array
            text, closed = body.split("#", 1)[0], False
            if ")" in text:
                text, closed = text.split(")", 1)[0], True
            words.extend(w for w in text.split() if w)
            if closed:
                break
            j += 1
            if j >= len(lines):
                raise ValueError(f"Unterminated plugins=( starting at line {i + 1}")
            body = lines[j]

        return PluginAssignment(start=i, end=j, indent=m.group("indent"), plugins=words)
    return None


def merge_plugins(existing: Sequence[str], wanted: Sequence[str]) -> List[str]:
    """Keep existing order, append what is missing, drop duplicates."""

    merged: List[str] = []
    for name in [*existing, *wanted]:
        if name not in merged:
            merged.append(name)
    return merged


def set_plugins(text: str, wanted: Sequence[str]) -> tuple[str, bool]:
    """Return (new_text, changed) with every wanted plugin enabled exactly once."""

    lines = text.splitlines()
    assignment = find_plugins(lines)

    if assignment is None:
        new_line = f"plugins=({' '.join(merge_plugins([], wanted))})"
        at = next((i for i, l in enumerate(lines) if _SOURCE_OMZ_RE.match(l)), None)
        if at is None:
            lines.append(new_line)
        else:
            lines.insert(at, new_line)
        logger.debug("Inserted plugin assignment: %s", new_line)
        return "\n".join(lines) + "\n", True

    merged = merge_plugins(assignment.plugins, wanted)
    if merged == assignment.plugins:
        return text, False

    new_line = f"{assignment.indent}plugins=({' '.join(merged)})"
    lines[assignment.start : assignment.end + 1] = [new_line]
    return "\n".join(lines) + "\n", True
