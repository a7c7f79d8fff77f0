"""
Consistent user message formatting for labelstats.

Messages go through the standard ``logging`` module (logger
``labelstats.console``) so that one logging level controls what reaches the
console. Standard messages use the WORKFLOW level (25), verbose ones INFO.
"""

from __future__ import annotations

import logging
from enum import Enum

#: Level of standard user-facing messages, between INFO and WARNING
WORKFLOW = 25
logging.addLevelName(WORKFLOW, "WORKFLOW")

CONSOLE_LOGGER_NAME = "labelstats.console"


class MessageType(Enum):
    """Types of messages that can be displayed."""

    INFO = "·"  # General information
    SUCCESS = "✓"  # Operation completed successfully
    WARNING = "⚡"  # Warning message
    ERROR = "✗"  # Error message
    PROGRESS = "→"  # Progress update
    SECTION = "="  # Section header


class ConsoleLogger:
    """
    Console logger for user-facing messages.

    Parameters
    ----------
    log_level : int, default=1
        Verbosity:
        - 0: Silent (no output)
        - 1: Standard (progress, results, summaries)
        - 2: Verbose (per-label detail)
    width : int, default=70
        Width for section headers
    indent : str, default="  "
        Indentation string for nested messages

    Examples
    --------
    >>> logger = ConsoleLogger(log_level=1)
    >>> logger.section("SUBJECT SPACE LABEL STATISTICS")
    >>> logger.progress("Processing sub-01.nii.gz", current=1, total=10)
    →  Processing sub-01.nii.gz [1/10]
    """

    def __init__(self, log_level: int = 1, width: int = 70, indent: str = "  "):
        self.log_level = log_level
        self.width = width
        self.indent = indent
        self._logger = logging.getLogger(CONSOLE_LOGGER_NAME)

    def _emit(self, message: str, min_level: int = 1, level: int = WORKFLOW) -> None:
        if self.log_level >= min_level:
            self._logger.log(level, message)

    def section(self, title: str) -> None:
        """Print a major section header."""
        separator = MessageType.SECTION.value * self.width
        self._emit(separator)
        self._emit(title)
        self._emit(separator)

    def info(self, message: str, indent_level: int = 0, verbose: bool = False) -> None:
        """
        Print an informational message.

        With ``verbose=True`` the message is only shown at log_level 2.
        """
        indent = self.indent * indent_level
        if verbose:
            self._emit(f"{indent}{MessageType.INFO.value}  {message}", min_level=2, level=logging.INFO)
        else:
            self._emit(f"{indent}{MessageType.INFO.value}  {message}")

    def success(self, message: str, details: dict | None = None, indent_level: int = 0) -> None:
        """Print a success message followed by optional ``key: value`` details."""
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.SUCCESS.value} {message}")

        if details:
            detail_indent = self.indent * (indent_level + 1)
            for key, value in details.items():
                if isinstance(value, int) and value >= 1000:
                    formatted_value = f"{value:,}"
                else:
                    formatted_value = str(value)
                self._emit(f"{detail_indent}- {key}: {formatted_value}")

    def warning(self, message: str, indent_level: int = 0) -> None:
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.WARNING.value}  {message}", level=logging.WARNING)

    def error(self, message: str, indent_level: int = 0) -> None:
        indent = self.indent * indent_level
        self._emit(f"{indent}{MessageType.ERROR.value} {message}", level=logging.ERROR)

    def progress(
        self,
        message: str,
        current: int | None = None,
        total: int | None = None,
        indent_level: int = 0,
        verbose: bool = False,
    ) -> None:
        """Print a progress update, with ``[current/total]`` when both are given."""
        indent = self.indent * indent_level
        progress_str = f"{indent}{MessageType.PROGRESS.value}  {message}"
        if current is not None and total is not None:
            progress_str += f" [{current}/{total}]"

        if verbose:
            self._emit(progress_str, min_level=2, level=logging.INFO)
        else:
            self._emit(progress_str)

    def label_table(self, labels) -> None:
        """
        Print the labels statistics are computed on.

        Parameters
        ----------
        labels : LabelDictionary
            Labels in output column order.
        """
        self._emit(f"Computing label statistics on {len(labels)} labels:")
        for label_id, name in labels.items():
            self._emit(f"{self.indent}{label_id}\t{name}")


def setup_logging(level: int) -> None:
    """
    Configure logging for command line use.

    Diagnostics go to the root logger with timestamps; user-facing console
    messages are printed bare.
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logging.getLogger().setLevel(level)

    console = logging.getLogger(CONSOLE_LOGGER_NAME)
    if not any(getattr(h, "_labelstats_console", False) for h in console.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(message)s"))
        handler._labelstats_console = True
        console.addHandler(handler)
    console.propagate = False
