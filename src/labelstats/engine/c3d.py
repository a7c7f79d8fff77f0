"""
Convert3D (c3d) statistics engine.

Runs ``c3d ... -lstat`` as a subprocess and returns its table output:

- subject space:  ``c3d <gray> -scale <s> -dup <labels> -copy-transform -lstat``
- template space: ``c3d <gray> -scale <s> <labels> -lstat``
- label image:    ``c3d <labels> -dup -lstat``

c3d writes numbers with limited precision. For very small intensities, use a
scale factor (e.g. 1000) to keep significant digits in the output.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path

from labelstats.core.exceptions import EngineError
from labelstats.engine.base import StatsEngine

logger = logging.getLogger(__name__)

C3D_INSTALL_HINT = "Please install Convert3D: http://www.itksnap.org/pmwiki/pmwiki.php?n=Convert3D.Convert3D"


def check_c3d_available(executable: str = "c3d") -> bool:
    """
    Check if the c3d executable can be found.

    Parameters
    ----------
    executable : str, default="c3d"
        Command name or path of the c3d executable.

    Returns
    -------
    bool
        True if c3d is available.

    Raises
    ------
    EngineError
        If c3d is not installed or not in PATH.

    Examples
    --------
    >>> from labelstats.engine.c3d import check_c3d_available
    >>> try:
    ...     check_c3d_available()
    ... except EngineError as e:
    ...     print(f"c3d not available: {e}")
    """
    if shutil.which(executable) is None:
        raise EngineError(f"c3d executable '{executable}' not found in PATH\n{C3D_INSTALL_HINT}")
    return True


def run_c3d_command(command: list[str], timeout: float | None = None) -> str:
    """
    Execute a c3d command and return its standard output.

    Parameters
    ----------
    command : list of str
        Command and arguments to execute.
    timeout : float, optional
        Seconds to wait before giving up. None waits indefinitely.

    Returns
    -------
    str
        Captured standard output.

    Raises
    ------
    EngineError
        If the executable is missing, exits non-zero, or times out.
    """
    logger.debug(f"Executing: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            check=True,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise EngineError(f"c3d command '{command[0]}' not found. {C3D_INSTALL_HINT}") from e
    except subprocess.TimeoutExpired as e:
        raise EngineError(f"c3d command timed out after {timeout}s: {' '.join(command)}") from e
    except subprocess.CalledProcessError as e:
        raise EngineError(f"c3d command failed: {' '.join(command)}\n{e.stderr}") from e

    return result.stdout


class C3dEngine(StatsEngine):
    """
    Statistics engine backed by the c3d command line tool.

    Parameters
    ----------
    executable : str, default="c3d"
        Command name or path of the c3d executable.
    timeout : float, optional
        Per-invocation timeout in seconds. None waits indefinitely.
    """

    name = "c3d"

    def __init__(self, executable: str = "c3d", timeout: float | None = None):
        self.executable = executable
        self.timeout = timeout

    def label_stats_table(
        self,
        image: Path,
        label_image: Path,
        scale: float = 1.0,
        copy_transform: bool = False,
    ) -> str:
        command = [self.executable, str(image), "-scale", repr(float(scale))]
        if copy_transform:
            command += ["-dup", str(label_image), "-copy-transform"]
        else:
            command.append(str(label_image))
        command.append("-lstat")
        return run_c3d_command(command, timeout=self.timeout)

    def label_image_table(self, label_image: Path) -> str:
        command = [self.executable, str(label_image), "-dup", "-lstat"]
        return run_c3d_command(command, timeout=self.timeout)

    def check_available(self) -> bool:
        return check_c3d_available(self.executable)

    def __repr__(self) -> str:
        return f"C3dEngine(executable='{self.executable}', timeout={self.timeout})"
