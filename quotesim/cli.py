"""
Command line entry point.

    quotesim simulate --no-manual-price-cost --margin 25
    quotesim scenarios
    quotesim validate [--process flow.yaml] [--decision table.yaml]

Exit status is 1 when validation finds failing scenarios, 2 on engine or
definition errors and 3 when the simulation input is rejected.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Settings
from .errors import SimulatorError, ValidationError
from .scenarios.runner import run_all_scenarios
from .service import SimulatorService


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="quotesim", description="Design-time quote validity process simulator")
    parser.add_argument("--process", type=Path, help="YAML process definition (default: bundled example)")
    parser.add_argument("--decision", type=Path, help="YAML decision table (default: bundled example)")
    parser.add_argument("--log-level", help="Override QUOTESIM_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    simulate = sub.add_parser("simulate", help="Run the process once and print the result as JSON")
    simulate.add_argument("--manual-price-cost", action=argparse.BooleanOptionalAction, default=False)
    simulate.add_argument("--margin", type=float, required=True, help="Deal margin percent")

    sub.add_parser("scenarios", help="List the catalogued scenarios")

    validate = sub.add_parser("validate", help="Run every scenario and report whether the definitions are valid")
    validate.add_argument("--json", action="store_true", help="Print the report as JSON")
    validate.add_argument("--parallel", action="store_true", help="Run execution scenarios on a thread pool")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.process is not None:
        overrides["process_file"] = args.process
    if args.decision is not None:
        overrides["decision_file"] = args.decision
    if args.log_level:
        overrides["log_level"] = args.log_level
    settings = Settings(**overrides)
    logging.basicConfig(level=settings.log_level.upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s", stream=sys.stderr)

    try:
        service = SimulatorService(settings=settings)

        if args.command == "simulate":
            data = service.simulate({"manualPriceCost": args.manual_price_cost, "dealMarginPercent": args.margin})
            print(json.dumps(data, indent=2))
            return 0

        if args.command == "scenarios":
            print(json.dumps(service.scenarios(), indent=2))
            return 0

        report = run_all_scenarios(service.interpreter.run, parallel=args.parallel or settings.parallel_scenarios,
                                   max_workers=settings.scenario_workers)
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False) if args.json else report.format_summary())
        return 0 if report.all_passed else 1
    except ValidationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 3
    except (SimulatorError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
