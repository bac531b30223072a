# common/core_utils.py
# -*- coding: utf-8 -*-
"""
Logging setup for the provisioner.

Console output is split by level: records below ERROR go to stdout, ERROR
and above go to stderr. Each line carries a level symbol and, on a TTY,
an ANSI colour.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Union

from provisioning.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER = (
    "{log_prefix}%(asctime)s - %(levelname)s - %(symbol)s %(message)s"
)
SIMPLE_LOG_FORMAT_NO_PREFIX = "%(asctime)s - %(levelname)s - %(symbol)s %(message)s"
DETAILED_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(module)s.%(funcName)s:%(lineno)d - %(message)s"

RESET = "\033[0m"
LEVEL_COLORS: Dict[int, str] = {
    logging.DEBUG: "",
    logging.INFO: "\033[0;32m",
    logging.WARNING: "\033[1;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}


class SymbolFormatter(logging.Formatter):
    """
    A formatter that adds a level symbol to each record and optionally
    wraps the whole line in the level's colour.
    """

    def __init__(
        self,
        fmt=None,
        datefmt=None,
        style="%",
        validate=True,
        symbols=None,
        use_color: bool = False,
    ):
        super().__init__(fmt, datefmt, style, validate)
        self.symbols = symbols or SYMBOLS_DEFAULT
        self.use_color = use_color

    def format(self, record):
        if record.levelno == logging.DEBUG:
            record.symbol = self.symbols.get("debug", "🐛")
        elif record.levelno == logging.INFO:
            record.symbol = self.symbols.get("info", "ℹ️")
        elif record.levelno == logging.WARNING:
            record.symbol = self.symbols.get("warning", "⚠️")
        elif record.levelno == logging.ERROR:
            record.symbol = self.symbols.get("error", "❌")
        elif record.levelno == logging.CRITICAL:
            record.symbol = self.symbols.get("critical", "🔥")
        else:
            record.symbol = ""

        # Messages that already start with a symbol don't get a second one.
        if record.symbol and str(record.msg).lstrip().startswith(
            tuple(self.symbols.values())
        ):
            record.symbol = ""

        line = super().format(record)
        color = LEVEL_COLORS.get(record.levelno, "")
        if self.use_color and color:
            return f"{color}{line}{RESET}"
        return line


class MaxLevelFilter(logging.Filter):
    """Passes only records strictly below a level."""

    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def _stream_is_tty(stream: TextIO) -> bool:
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        return False


def resolve_log_level(log_level: Union[int, str]) -> int:
    if isinstance(log_level, int):
        return log_level
    numeric_level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(numeric_level, int):
        return logging.INFO
    return numeric_level


def setup_logging(
    log_level: Union[int, str] = logging.INFO,
    log_file: Optional[Union[str, Path]] = None,
    log_to_console: bool = True,
    log_prefix: Optional[str] = None,
    use_color: bool = True,
    symbols: Optional[Dict[str, str]] = None,
    stdout: Optional[TextIO] = None,
    stderr: Optional[TextIO] = None,
) -> None:
    """
    Configures the root logger for a provisioning run.

    Parameters:
    log_level: int or str
        Logging level, e.g. logging.INFO or "DEBUG". Unknown names fall back
        to INFO.
    log_file: Optional path
        If given, every record is also appended to this file, uncoloured.
        A file that cannot be opened is reported on stderr and skipped.
    log_to_console: bool
        Attach the stdout/stderr console handlers.
    log_prefix: Optional[str]
        Prefix for every line, e.g. "[DOCKER-SETUP]".
    use_color: bool
        Colour console lines. Only applied when the stream is a TTY.
    symbols: Optional mapping of level names to symbols.
    stdout, stderr: Streams for the console handlers. Default to
        sys.stdout and sys.stderr at call time.
    """
    numeric_level = resolve_log_level(log_level)
    out_stream = stdout if stdout is not None else sys.stdout
    err_stream = stderr if stderr is not None else sys.stderr

    actual_prefix = (
        (log_prefix.strip() + " ")
        if log_prefix and log_prefix.strip()
        else ""
    )
    if actual_prefix:
        final_format_str = SIMPLE_LOG_FORMAT_WITH_PREFIX_PLACEHOLDER.format(
            log_prefix=actual_prefix
        )
    else:
        final_format_str = SIMPLE_LOG_FORMAT_NO_PREFIX

    def make_formatter(colored: bool) -> SymbolFormatter:
        return SymbolFormatter(
            fmt=final_format_str,
            datefmt="%Y-%m-%d %H:%M:%S",
            symbols=symbols,
            use_color=colored,
        )

    handlers: List[logging.Handler] = []
    if log_to_console:
        stdout_handler = logging.StreamHandler(out_stream)
        stdout_handler.addFilter(MaxLevelFilter(logging.ERROR))
        stdout_handler.setFormatter(
            make_formatter(use_color and _stream_is_tty(out_stream))
        )
        handlers.append(stdout_handler)

        stderr_handler = logging.StreamHandler(err_stream)
        stderr_handler.setLevel(logging.ERROR)
        stderr_handler.setFormatter(
            make_formatter(use_color and _stream_is_tty(err_stream))
        )
        handlers.append(stderr_handler)

    if log_file:
        try:
            log_file_path = Path(log_file)
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(
                log_file_path, mode="a", encoding="utf-8"
            )
            file_handler.setFormatter(make_formatter(False))
            handlers.append(file_handler)
        except OSError as e:
            print(
                f"Warning: Could not create file handler for log file {log_file}: {e}",
                file=err_stream,
            )

    if not handlers:  # pragma: no cover
        handlers.append(logging.StreamHandler(out_stream))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    for handler in handlers:
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(numeric_level)}. Format: '{final_format_str}'"
    )
