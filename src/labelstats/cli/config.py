"""
labelstats CLI configuration module.

This module provides the CLIConfig dataclass for holding parsed
CLI arguments and validating them.

Classes:
    CLIConfig: Configuration from CLI arguments.

Functions:
    load_yaml_config: Load configuration from YAML file.
    generate_config_template: Generate a template YAML configuration.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from labelstats.core.exceptions import UsageError

if TYPE_CHECKING:
    from argparse import Namespace

logger = logging.getLogger(__name__)

MODES = ("subject", "template")
ENGINE_NAMES = ("c3d", "native")


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """
    Load configuration from a YAML file.

    Parameters
    ----------
    config_path : Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file doesn't exist.
    ValueError
        If YAML parsing fails or the top level is not a mapping.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        try:
            config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}") from e

    if not isinstance(config, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return config


def generate_config_template() -> str:
    """
    Generate a template YAML configuration file.

    Returns
    -------
    str
        YAML template content.
    """
    return """\
# labelstats configuration file
# Command-line options override these values.

label_def: /path/to/labelDefinition.csv
output_root: /path/to/output/study_

# Gray images: either a list or a text file with one image per line
images:
  - /path/to/sub-01.nii.gz
  - /path/to/sub-02.nii.gz
image_list: null

# subject: one label image per gray image (list or file, same order)
label_images: []
label_image_list: null

# template: one shared label image
label_image: null
output_label_vols: false

scale: 1.0
engine: c3d            # c3d | native
c3d_executable: c3d
engine_timeout: null   # seconds, null waits indefinitely

show_progress: false
verbosity: 0
"""


def _as_list(value: Any) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _as_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return Path(value)


_TRUE_STRINGS = ("true", "yes", "on", "1")
_FALSE_STRINGS = ("false", "no", "off", "0")


def _as_bool(value: Any, key: str) -> bool:
    """Interpret a flag value; integers count as enabled when non-zero."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise UsageError(f"{key} must be true or false, got {value!r}")


@dataclass
class CLIConfig:
    """
    Configuration from CLI arguments.

    Attributes
    ----------
    mode : str
        "subject" (each image has its own label image) or "template".
    label_def : Path, optional
        Label definition CSV file.
    output_root : str, optional
        Prefix of every output file path.
    images : list of str, optional
        Gray images given directly.
    image_list : Path, optional
        File listing gray images; overrides ``images``.
    label_images : list of str, optional
        Label images given directly. Template mode takes exactly one.
    label_image_list : Path, optional
        File listing label images (subject mode); overrides ``label_images``.
    scale : float
        Multiplier applied to gray intensities before statistics are taken.
    output_label_vols : bool
        Write label image counts and volumes (template mode).
    engine : str
        Statistics engine name ("c3d" or "native").
    c3d_executable : str
        c3d command name or path.
    engine_timeout : float, optional
        Per-invocation engine timeout in seconds.
    show_progress : bool
        Show a progress bar over images.
    verbose_count : int
        Logging verbosity level (0-3).
    """

    mode: str
    label_def: Path | None = None
    output_root: str | None = None
    images: list[str] | None = None
    image_list: Path | None = None
    label_images: list[str] | None = None
    label_image_list: Path | None = None
    scale: float = 1.0
    output_label_vols: bool = False
    engine: str = "c3d"
    c3d_executable: str = "c3d"
    engine_timeout: float | None = None
    show_progress: bool = False
    verbose_count: int = 0

    @property
    def is_subject_space(self) -> bool:
        return self.mode == "subject"

    @property
    def log_level(self) -> int:
        """
        Convert verbose_count to log level.

        Returns
        -------
        int
            Logging level (25=WORKFLOW, 20=INFO, 10=DEBUG).
        """
        return max(25 - 5 * self.verbose_count, 10)

    @classmethod
    def from_args(cls, args: Namespace, yaml_config: dict[str, Any] | None = None) -> CLIConfig:
        """
        Create CLIConfig from parsed arguments and optional YAML config.

        YAML config values are used as defaults; CLI arguments override them.

        Parameters
        ----------
        args : Namespace
            Parsed arguments from argparse.
        yaml_config : dict, optional
            Configuration loaded from YAML file.

        Returns
        -------
        CLIConfig
            Configuration instance.
        """
        yaml_config = yaml_config or {}

        # CLI arg takes precedence over YAML
        def get_val(cli_name: str, yaml_key: str, default=None):
            cli_val = getattr(args, cli_name, None)
            if cli_val is not None:
                return cli_val
            value = yaml_config.get(yaml_key)
            return default if value is None else value

        # Subject mode takes --label-image IMAGE..., template mode a single --label-image
        label_images = getattr(args, "label_images", None)
        if label_images is None and getattr(args, "label_image", None) is not None:
            label_images = [args.label_image]
        if label_images is None:
            label_images = _as_list(yaml_config.get("label_images"))
        if not label_images and yaml_config.get("label_image"):
            label_images = _as_list(yaml_config.get("label_image"))

        output_root = get_val("output_root", "output_root")
        engine_timeout = get_val("engine_timeout", "engine_timeout")

        return cls(
            mode=args.mode,
            label_def=_as_path(get_val("label_def", "label_def")),
            output_root=None if output_root is None else str(output_root),
            images=getattr(args, "images", None) or _as_list(yaml_config.get("images")),
            image_list=_as_path(get_val("image_list", "image_list")),
            label_images=label_images or None,
            label_image_list=_as_path(get_val("label_image_list", "label_image_list")),
            scale=float(get_val("scale", "scale", 1.0)),
            output_label_vols=_as_bool(
                get_val("output_label_vols", "output_label_vols", False), "output_label_vols"
            ),
            engine=get_val("engine", "engine", "c3d"),
            c3d_executable=str(get_val("c3d_executable", "c3d_executable", "c3d")),
            engine_timeout=None if engine_timeout is None else float(engine_timeout),
            show_progress=_as_bool(
                get_val("show_progress", "show_progress", False), "show_progress"
            ),
            verbose_count=getattr(args, "verbose_count", 0) or yaml_config.get("verbosity", 0),
        )

    def validate(self) -> None:
        """
        Validate configuration.

        Raises
        ------
        UsageError
            If required input is missing or options conflict.
        """
        if self.mode not in MODES:
            raise UsageError(f"Invalid mode '{self.mode}'. Choose one of: {', '.join(MODES)}")

        if self.label_def is None:
            raise UsageError("--label-def is required")

        if not self.output_root:
            raise UsageError("--output-root is required")

        if not self.images and self.image_list is None:
            raise UsageError("No input images specified (--image or --image-list)")

        if self.is_subject_space:
            if not self.label_images and self.label_image_list is None:
                raise UsageError("No label images specified (--label-image or --label-image-list)")
            if self.output_label_vols:
                raise UsageError("--output-label-vols is only available in template mode")
        else:
            if self.label_image_list is not None:
                raise UsageError("--label-image-list is only available in subject mode")
            if not self.label_images:
                raise UsageError("No label image specified (--label-image)")
            if len(self.label_images) != 1:
                raise UsageError(
                    f"Template mode takes exactly one label image, got {len(self.label_images)}"
                )

        if not math.isfinite(self.scale):
            raise UsageError(f"--scale must be a finite number, got {self.scale}")

        if self.engine not in ENGINE_NAMES:
            raise UsageError(
                f"Invalid engine '{self.engine}'. Choose one of: {', '.join(ENGINE_NAMES)}"
            )

        if self.engine_timeout is not None and self.engine_timeout <= 0:
            raise UsageError(f"--engine-timeout must be positive, got {self.engine_timeout}")
