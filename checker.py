#!/usr/bin/env python3
"""
Banker's Safe-State Checker
Main entry point.

Reads a resource-allocation state (from a JSON scenario or interactively),
validates it and reports whether it is safe, with a safe sequence if so.
"""

import argparse
import sys
from typing import List, Optional

from banker.algorithms.safety import is_safe_state, unfinished_processes
from banker.errors import ValidationError
from banker.models.system_state import SystemState
from banker.utils.interactive import collect_system
from banker.utils.logger import CheckerLogger
from banker.utils.scenario_loader import (
    ScenarioLoadError,
    get_scenario_description,
    load_scenario,
)


EXIT_SAFE = 0
EXIT_UNSAFE = 1
EXIT_INVALID = 2


def run_check(system_state: SystemState, logger: CheckerLogger) -> bool:
    """
    Display the initialized state and run the safety check once.

    Args:
        system_state: Validated system state
        logger: Logger instance

    Returns:
        True if the state is safe
    """
    logger.log("\n--- System State Initialized ---")
    logger.log(f"Total Resources: {system_state.capacity.tolist()}")
    logger.log(f"Initial Available: {system_state.available.tolist()}")
    for p in system_state.processes:
        logger.log(
            f" P{p.pid}: Allocated={p.allocation.tolist()}, "
            f"Max={p.max_need.tolist()}, Need={p.need.tolist()}"
        )
    logger.log("-"*35)

    if logger.verbose:
        system_state.assert_resource_conservation("after initialization")
    logger.log_system_state(system_state.display())

    logger.log("\n--- Checking System Safety ---")
    is_safe, sequence = is_safe_state(system_state)

    unfinished = None
    if not is_safe and logger.verbose:
        unfinished = unfinished_processes(system_state)
    logger.log_safety_result(is_safe, sequence, unfinished)

    return is_safe


def _load_state(args: argparse.Namespace, logger: CheckerLogger) -> Optional[SystemState]:
    """Build the system state from the selected input source."""
    if args.interactive:
        return collect_system(logger=logger)

    description = get_scenario_description(args.scenario)
    logger.log(f"Scenario: {args.scenario}")
    if description:
        logger.log(f"  {description}")

    try:
        return load_scenario(args.scenario)
    except ScenarioLoadError as e:
        logger.log(f"Failed to load scenario: {e}", "error")
    except ValidationError as e:
        logger.log(f"Invalid scenario: {e}", "error")
    return None


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the checker."""
    parser = argparse.ArgumentParser(
        description="Banker's Algorithm safe-state checker"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        '--scenario',
        type=str,
        help='Path to scenario JSON file'
    )
    source.add_argument(
        '--interactive',
        action='store_true',
        help='Enter resources and processes at the prompt'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )
    parser.add_argument(
        '--log-file',
        type=str,
        default=None,
        help='Also write output to this file'
    )

    args = parser.parse_args(argv)

    input_name = "interactive" if args.interactive else args.scenario
    try:
        logger = CheckerLogger(verbose=args.verbose, log_file=args.log_file, source=input_name)
    except OSError as e:
        print(f"[ERROR] Cannot open log file {args.log_file}: {e}")
        return EXIT_INVALID

    with logger:
        system_state = _load_state(args, logger)
        if system_state is None:
            logger.log("Initialization failed")
            return EXIT_INVALID

        return EXIT_SAFE if run_check(system_state, logger) else EXIT_UNSAFE


if __name__ == '__main__':
    sys.exit(main())
