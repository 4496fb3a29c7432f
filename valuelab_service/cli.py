"""
Command-line entry point: run one of the engines on a JSON assumption file.

    valuelab dcf --input dcf.json --forecast smoothing
    valuelab lbo --input deal.json
    valuelab risk --seed 7
    valuelab irr --input cashflows.json

Missing keys take the engine defaults. Output is JSON on stdout with
non-finite numbers rendered as null.
"""

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from valuelab_engine import InputError, ValidationError
from valuelab_service.services.valuation import DEFAULT_SMOOTHING_ALPHA, ValuationService
from valuelab_service.utils.json import sanitize_for_json

EXIT_INVALID_INPUT = 2


def _load_json(path: Optional[str]) -> Any:
    if not path:
        return {}
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="valuelab", description="DCF, LBO and risk models from a JSON assumption set.")
    sub = parser.add_subparsers(dest="command", required=True)

    dcf = sub.add_parser("dcf", help="Discounted cash flow valuation")
    dcf.add_argument("--input", "-i", help="Assumptions JSON file ('-' for stdin)")
    dcf.add_argument("--forecast", choices=["trend", "smoothing"], default="trend", help="Revenue forecast assistant mode")
    dcf.add_argument("--alpha", type=float, default=DEFAULT_SMOOTHING_ALPHA, help="Smoothing factor")

    lbo = sub.add_parser("lbo", help="Leveraged buyout returns")
    lbo.add_argument("--input", "-i", help="Assumptions JSON file ('-' for stdin)")

    risk = sub.add_parser("risk", help="VaR, Kelly sizing and Monte Carlo distribution")
    risk.add_argument("--input", "-i", help="Assumptions JSON file ('-' for stdin)")
    risk.add_argument("--seed", type=int, default=None, help="Seed for a reproducible Monte Carlo run")

    irr = sub.add_parser("irr", help="IRR of a cashflow schedule")
    irr.add_argument("--input", "-i", required=True, help='JSON: [{"t": 0, "cf": -100}, ...] or {"cashflows": [...], "guess": 0.2}')
    irr.add_argument("--guess", type=float, default=None, help="Initial rate guess")

    return parser


def run(args: argparse.Namespace) -> Dict[str, Any]:
    service = ValuationService()
    data = _load_json(args.input)

    if args.command == "dcf":
        return service.calculate_dcf(data, args.forecast, args.alpha)
    if args.command == "lbo":
        return service.calculate_lbo(data)
    if args.command == "risk":
        return service.calculate_risk(data, seed=args.seed)

    cashflows: List[Dict[str, float]] = data if isinstance(data, list) else data.get("cashflows", [])
    guess = args.guess
    if guess is None:
        guess = data.get("guess", 0.20) if isinstance(data, dict) else 0.20
    return service.calculate_irr(cashflows, guess=guess)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        result = run(args)
    except ValidationError as e:
        for message in e.messages:
            print(f"error: {message}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except InputError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT
    except (OSError, json.JSONDecodeError, KeyError) as e:
        print(f"error: could not read input: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT

    print(json.dumps(sanitize_for_json(result), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
