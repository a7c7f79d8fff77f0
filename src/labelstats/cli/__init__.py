"""
labelstats CLI module.

Usage:
    labelstats subject --image IMG... --label-image LBL... --label-def DEF --output-root ROOT
    labelstats template --image IMG... --label-image LBL --label-def DEF --output-root ROOT

Example:
    labelstats template --image-list images.txt --label-image atlas.nii.gz \
        --label-def atlas.csv --output-root stats/atlas_ --scale 1000 --output-label-vols
"""

from labelstats.cli.main import main
from labelstats.cli.parser import build_parser

__all__ = ["main", "build_parser"]
