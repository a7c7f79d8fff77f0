"""
labelstats CLI main module.

This module provides the main entry point for the labelstats CLI, orchestrating
the workflow from argument parsing through statistics computation to CSV output.

Functions:
    main: Main CLI entry point that parses arguments and runs the workflow.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from labelstats.core.exceptions import (
    EngineError,
    FileAccessError,
    LabelDefinitionError,
    LabelStatsError,
    UsageError,
)

if TYPE_CHECKING:
    from labelstats.cli.config import CLIConfig
    from labelstats.core.pipeline import RunSummary

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_USAGE_ERROR = 1
EXIT_FILE_ERROR = 64
EXIT_ENGINE_ERROR = 65


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point.

    Parses command-line arguments, loads label definitions and image lists,
    computes label statistics and writes the CSV tables.

    Parameters
    ----------
    argv : list of str, optional
        Command-line arguments. If None, uses sys.argv[1:].

    Returns
    -------
    int
        Exit code (0 for success, non-zero for errors).
    """
    from labelstats.cli.config import CLIConfig, generate_config_template, load_yaml_config
    from labelstats.cli.parser import build_parser, get_subparser
    from labelstats.utils.logging import ConsoleLogger, setup_logging

    parser = build_parser()

    if argv is None:
        argv = sys.argv[1:]
    if not argv:
        parser.print_help()
        return EXIT_USAGE_ERROR
    if "--generate-config" in argv:
        print(generate_config_template())
        return EXIT_SUCCESS

    args = parser.parse_args(argv)
    if args.mode is None:
        parser.print_help()
        return EXIT_USAGE_ERROR

    subparser = get_subparser(parser, args.mode)

    yaml_config = None
    if args.config:
        try:
            yaml_config = load_yaml_config(args.config)
        except (FileNotFoundError, ValueError) as e:
            print(f"Config file error: {e}", file=sys.stderr)
            return EXIT_USAGE_ERROR

    try:
        config = CLIConfig.from_args(args, yaml_config)
        config.validate()
    except (UsageError, ValueError) as e:
        subparser.print_usage(sys.stderr)
        print(f"  {e}", file=sys.stderr)
        return EXIT_USAGE_ERROR

    setup_logging(config.log_level)
    console = ConsoleLogger()
    if args.config:
        logger.info(f"Loaded configuration from: {args.config}")

    try:
        summary = run_workflow(config)
    except UsageError as e:
        subparser.print_usage(sys.stderr)
        console.error(str(e))
        return EXIT_USAGE_ERROR
    except (FileAccessError, LabelDefinitionError) as e:
        console.error(str(e))
        return EXIT_FILE_ERROR
    except EngineError as e:
        console.error(f"Statistics engine failed: {e}")
        return EXIT_ENGINE_ERROR
    except LabelStatsError as e:
        console.error(str(e))
        return EXIT_USAGE_ERROR

    logger.info(f"Wrote {len(summary.output_files)} file(s) for {summary.n_images} image(s)")
    return EXIT_SUCCESS


def run_workflow(config: CLIConfig) -> RunSummary:
    """
    Run label statistics for a validated configuration.

    Parameters
    ----------
    config : CLIConfig
        Validated configuration.

    Returns
    -------
    RunSummary
    """
    from labelstats.core.jobs import (
        ImageRef,
        build_subject_jobs,
        build_template_jobs,
        resolve_image_list,
    )
    from labelstats.core.labels import load_label_definitions
    from labelstats.core.pipeline import RunContext, run_subject_space, run_template_space
    from labelstats.engine import get_engine
    from labelstats.utils.logging import ConsoleLogger

    labels = load_label_definitions(config.label_def)
    images = resolve_image_list(config.images, config.image_list, what="input images")

    if config.is_subject_space:
        label_images = resolve_image_list(
            config.label_images, config.label_image_list, what="label images"
        )
        jobs = build_subject_jobs(images, label_images)
    else:
        jobs = build_template_jobs(images, ImageRef.parse(config.label_images[0]))

    if config.engine == "c3d":
        engine = get_engine(
            "c3d", executable=config.c3d_executable, timeout=config.engine_timeout
        )
    else:
        engine = get_engine(config.engine)
    engine.check_available()

    context = RunContext(
        labels=labels,
        engine=engine,
        output_root=config.output_root,
        scale=config.scale,
        show_progress=config.show_progress,
        console=ConsoleLogger(log_level=2 if config.verbose_count else 1),
    )

    if config.is_subject_space:
        return run_subject_space(jobs, context)
    return run_template_space(jobs, context, output_label_vols=config.output_label_vols)


if __name__ == "__main__":
    sys.exit(main())
