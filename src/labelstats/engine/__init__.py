"""
Statistics engines.

Engines compute per-label statistics tables for gray images over label images.
Two engines are available:

- ``c3d``: runs the Convert3D command line tool (default)
- ``native``: computes the same table in-process with nibabel and numpy
"""

from labelstats.engine.base import StatsEngine
from labelstats.engine.c3d import C3dEngine, check_c3d_available, run_c3d_command
from labelstats.engine.native import NibabelEngine
from labelstats.engine.records import LabelStatRecord, parse_stat_line, parse_stat_table

ENGINES: dict[str, type[StatsEngine]] = {
    C3dEngine.name: C3dEngine,
    NibabelEngine.name: NibabelEngine,
}


def get_engine(name: str, **kwargs) -> StatsEngine:
    """
    Create a statistics engine by name.

    Parameters
    ----------
    name : str
        "c3d" or "native".
    **kwargs
        Passed to the engine constructor (c3d: ``executable``, ``timeout``).

    Raises
    ------
    KeyError
        If no engine has that name.
    """
    if name not in ENGINES:
        raise KeyError(f"Unknown engine '{name}'. Available engines: {', '.join(ENGINES)}")
    return ENGINES[name](**kwargs)


__all__ = [
    "C3dEngine",
    "LabelStatRecord",
    "NibabelEngine",
    "StatsEngine",
    "check_c3d_available",
    "get_engine",
    "parse_stat_line",
    "parse_stat_table",
    "run_c3d_command",
]
