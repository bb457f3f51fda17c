"""
Command-line interface for the modeling primer.

Lists, prints and solves the tutorial's example models.
"""

import argparse
import json
import sys
from typing import List, Optional
from dotenv import load_dotenv

from utils.logging import set_log_level, setup_logger
from modeling.errors import ModelingError
from modeling.report import summarize
from tutorial import EXAMPLES, build_example

# Load environment variables from .env file
load_dotenv()

logger = setup_logger(__name__)


def list_examples() -> int:
    """
    Log the names of the available examples.

    Returns:
        int: Exit code (always 0)
    """
    for name, builder in EXAMPLES.items():
        doc = (builder.__doc__ or "").strip()
        summary = doc.splitlines()[0] if doc else ""
        logger.info(f"{name}: {summary}")
    return 0


def show_example(name: str) -> int:
    """
    Print an example model without solving it.

    Args:
        name: Example name

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    try:
        model = build_example(name)
    except (KeyError, ModelingError) as e:
        logger.error(f"Could not build example {name!r}: {e}")
        return 1

    print(model)
    return 0


def solve_example(name: str, output_file: Optional[str] = None) -> int:
    """
    Build and solve an example, log the solution and optionally save it.

    Args:
        name: Example name
        output_file: Optional output file path to save the report in JSON format

    Returns:
        int: Exit code (0 for success, non-zero for error)
    """
    try:
        model = build_example(name)
        model.optimize()
        report = summarize(model)
    except (KeyError, ModelingError) as e:
        logger.error(f"Could not solve example {name!r}: {e}")
        return 1

    logger.info(f"Termination status: {report.termination_status}")
    logger.info(f"Primal status: {report.primal_status}")
    logger.info(f"Dual status: {report.dual_status}")

    if report.objective_value is None:
        logger.warning(f"No solution found for example {name!r}")
    else:
        logger.info(f"Objective value: {report.objective_value}")
        for variable in report.variables:
            logger.info(f"{variable.name} = {variable.value}")
        for constraint in report.constraints:
            if constraint.shadow_price is not None:
                logger.info(f"shadow price of {constraint.name} = {constraint.shadow_price}")

    if output_file:
        with open(output_file, "w") as f:
            json.dump(report.model_dump(), f, indent=2)
        logger.info(f"Results saved to {output_file}")

    return 0 if report.objective_value is not None else 1


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments; defaults to ``sys.argv[1:]``

    Returns:
        int: Exit code
    """
    parser = argparse.ArgumentParser(description="Indexed LP modeling primer")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log at DEBUG level")
    mode_parser = parser.add_subparsers(dest="mode", help="Command")

    mode_parser.add_parser("list", help="List the example models")

    show_parser = mode_parser.add_parser("show", help="Print an example model")
    show_parser.add_argument("name", help="Example name")

    solve_parser = mode_parser.add_parser("solve", help="Solve an example model")
    solve_parser.add_argument("name", help="Example name")
    solve_parser.add_argument("--output", "-o", help="Output file for results (JSON)")

    args = parser.parse_args(argv)

    if args.verbose:
        set_log_level("DEBUG")

    if args.mode == "list":
        return list_examples()

    elif args.mode == "show":
        return show_example(args.name)

    elif args.mode == "solve":
        return solve_example(args.name, output_file=args.output)

    else:
        # No mode selected, show help
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
