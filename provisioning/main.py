# provisioning/main.py
# -*- coding: utf-8 -*-
"""
Command-line entry point for the Docker CE provisioner.
"""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional

from common.core_utils import setup_logging
from common.errors import GENERIC_FAILURE_EXIT_CODE, ConfigurationError
from installer.components.docker_engine import verify_docker_available
from installer.registry import build_steps
from provisioning import __version__
from provisioning.config_loader import (
    DEFAULT_CONFIG_FILE,
    dump_app_settings,
    load_app_settings,
)
from provisioning.models import RunState
from provisioning.preconditions import default_preconditions
from provisioning.reporter import Reporter
from provisioning.sequencer import run_provisioning

logger = logging.getLogger(__name__)

KEYBOARD_INTERRUPT_EXIT_CODE = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker-provision",
        description="Install and configure Docker CE on CentOS 7 using Chinese mirrors.",
        epilog="Example: sudo docker-provision -c config.yaml --log-file /var/log/docker-setup.log",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help="Path to the YAML configuration file (optional).",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging."
    )
    parser.add_argument(
        "--log-file", default=None, help="Also append log lines to this file."
    )
    parser.add_argument(
        "--no-color", action="store_true", help="Disable coloured output."
    )
    parser.add_argument(
        "--list-steps",
        action="store_true",
        help="Print the ordered provisioning steps and exit.",
    )
    parser.add_argument(
        "--view-config",
        action="store_true",
        help="Print the effective configuration as YAML and exit.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def _cli_overrides(parsed_args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if parsed_args.verbose:
        overrides["log_level"] = "DEBUG"
    if parsed_args.log_file:
        overrides["log_file"] = parsed_args.log_file
    if parsed_args.no_color:
        overrides["use_color"] = False
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    """
    Parse arguments, run the provisioning steps and return the exit status.

    Returns:
        0 on success, the failing command's exit code, 1 for other fatal
        errors, or 130 when interrupted.
    """
    parsed_args = build_parser().parse_args(argv)

    try:
        app_settings = load_app_settings(
            parsed_args.config, _cli_overrides(parsed_args)
        )
    except ConfigurationError as e:
        # Logging is not configured yet.
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return GENERIC_FAILURE_EXIT_CODE

    setup_logging(
        log_level=app_settings.log_level,
        log_file=app_settings.log_file,
        log_prefix=app_settings.log_prefix,
        use_color=app_settings.use_color,
        symbols=app_settings.symbols,
    )

    steps = build_steps(app_settings, logger)

    if parsed_args.list_steps:
        for index, step in enumerate(steps, start=1):
            print(f"{index}. [{step.tag}] {step.name}")
        return 0

    if parsed_args.view_config:
        print(dump_app_settings(app_settings), end="")
        return 0

    reporter = Reporter(app_settings, logger)
    run_state = RunState()
    try:
        run_provisioning(
            steps,
            app_settings,
            run_state,
            preconditions=default_preconditions(app_settings, logger),
            final_check=lambda: verify_docker_available(app_settings, logger),
            reporter=reporter,
            current_logger=logger,
        )
    except KeyboardInterrupt:
        reporter.error(
            f"Interrupted during '{run_state.current_step_name}'. Exiting."
        )
        return KEYBOARD_INTERRUPT_EXIT_CODE

    reporter.summary(run_state)
    return run_state.exit_code


if __name__ == "__main__":
    sys.exit(main())
