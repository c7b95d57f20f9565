from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional, TextIO

DEFAULT_LOG_PATH = "/var/log/node-provisioner.log"

_RESET = "\033[0m"
_MARKERS = {
    logging.DEBUG: ("[.]", "\033[2m"),
    logging.INFO: ("[+]", "\033[1;32m"),
    logging.WARNING: ("[!]", "\033[1;33m"),
    logging.ERROR: ("[x]", "\033[1;31m"),
}


class MarkerFormatter(logging.Formatter):
    """Console format: one marker per severity, coloured when the stream is a TTY.

    [+] info / success, [!] warning, [x] error or critical, [.] debug.
    """

    def __init__(self, *, color: bool = False) -> None:
        super().__init__("%(message)s")
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        level = max((lvl for lvl in _MARKERS if lvl <= record.levelno), default=logging.DEBUG)
        marker, colour = _MARKERS[level]
        line = f"{marker} {super().format(record)}"
        if self.color:
            return f"{colour}{line}{_RESET}"
        return line


def _wants_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
    stream: Optional[TextIO] = None,
) -> str:
    """Configure logging.

    Every step and every command is recorded to log_path.

    Notes:
    - Non-root runs (the shell installer) usually cannot write to /var/log.
      We still *attempt* the requested path first and fall back to a file in
      the user's home directory, reporting both paths.

    Returns the actual file path being used, or "" when neither path is
    writable and only the console is logged to.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_node_provisioner_configured", False):
        return getattr(logger, "_node_provisioner_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        fallback = str(Path.home() / ".node-provisioner.log")
        try:
            file_handler = logging.FileHandler(fallback)
            chosen_path = fallback
        except OSError:
            # console only; the run itself does not need a log file
            chosen_path = ""
    if file_handler is not None:
        file_handler.setFormatter(fmt)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    if also_console:
        out = stream or sys.stderr
        console = logging.StreamHandler(out)
        console.setFormatter(MarkerFormatter(color=_wants_color(out)))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_node_provisioner_configured", True)
    setattr(logger, "_node_provisioner_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    if not chosen_path:
        logging.getLogger(__name__).warning("Cannot write %s or a fallback log file; logging to console only", log_path)
    return chosen_path
