"""Command-line entrypoint to generate or show a user's style report."""

import argparse
import json
import sys

from pydantic import ValidationError

from logic.validation import validation_failure
from style_app.app import StyleReportApp


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Generate a style report from a user's recent looks.")
    parser.add_argument("--user-id", required=True, help="User whose looks are analysed")
    parser.add_argument("--force", action="store_true", help="Request a fresh report; runs always regenerate")
    parser.add_argument("--latest", action="store_true", help="Print the stored report instead of generating")
    args = parser.parse_args(argv)

    app = StyleReportApp()
    try:
        if args.latest:
            report = app.get_latest_report(args.user_id)
            if report is None:
                print("No style report yet. Generate one first.", file=sys.stderr)
                return 1
            print(json.dumps(report, indent=2))
            return 0
        result = app.generate_style_report(args.user_id, force_regenerate=args.force)
    except ValidationError as exc:
        print(json.dumps(validation_failure("Invalid style report request", exc), indent=2, default=str))
        return 2
    print(json.dumps(result, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
