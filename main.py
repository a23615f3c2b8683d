"""Development entrypoint for the War Odds HTTP API and terminal calculator."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace

import uvicorn

from war_odds.config import get_settings
from war_odds.domain.errors import OddsError
from war_odds.domain.summary import OutcomeSummary
from war_odds.services import OddsForm

logger = logging.getLogger(__name__)


def _format_summary(title: str, summary: OutcomeSummary) -> str:
    lines = [f"{title}: {summary.total_chance * 100:.2f}%"]
    if not summary.victory_possible:
        lines.append("  No victory possible")
        return "\n".join(lines)
    lines.append(
        f"  probable {summary.probable_result}, average {summary.average:.0f}, "
        f"median {summary.median}"
    )
    for survivors, mass in summary.columns:
        lines.append(f"  {survivors:>3} survivors  {mass * 100:6.2f}%")
    return "\n".join(lines)


def _serve(args: argparse.Namespace) -> None:
    if args.reload:
        uvicorn.run(
            "war_odds.api.app:app",
            host=args.host,
            port=args.port,
            reload=True,
            factory=False,
        )
    else:
        from war_odds.api.app import app

        uvicorn.run(app, host=args.host, port=args.port, reload=False, factory=False)


def _odds(args: argparse.Namespace) -> int:
    form = OddsForm(starting_attackers=args.attackers, starting_defenders=args.defenders)
    form.modifiers = replace(form.modifiers, round_count=args.rounds)
    try:
        for flag in args.toggle:
            form.toggle(flag)
        for assignment in args.set:
            name, _, text = assignment.partition("=")
            if not form.update_field(name, text):
                logger.warning("ignoring malformed value for %s: %r", name, text)
    except KeyError as exc:
        print(f"unknown field or flag: {exc.args[0]}")
        return 2

    try:
        form.calculate()
    except (OddsError, ValueError) as exc:
        print(f"calculation failed: {exc}")
        return 1

    report = form.report()
    rates = form.rates
    print(f"Kill rates: attacker {rates.attacker:.4f}, defender {rates.defender:.4f}")
    print(_format_summary("Attacker Results", report.attacker))
    print(f"No win ({report.round_count} rounds): {report.undecided * 100:.2f}%")
    print(_format_summary("Defender Results", report.defender))
    return 0


def main() -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="War Odds battle calculator")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API server")
    serve.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    serve.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    serve.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )

    odds = subparsers.add_parser("odds", help="Print outcome odds for one battle")
    odds.add_argument("--attackers", type=float, default=100.0, help="Starting attackers")
    odds.add_argument("--defenders", type=float, default=100.0, help="Starting defenders")
    odds.add_argument(
        "--rounds", type=int, default=settings.default_round_count, help="Rounds to resolve"
    )
    odds.add_argument(
        "--toggle",
        action="append",
        default=[],
        metavar="FLAG",
        help="Flip a condition flag, e.g. defender_fortified (repeatable)",
    )
    odds.add_argument(
        "--set",
        action="append",
        default=[],
        metavar="FIELD=VALUE",
        help="Set a modifier field, e.g. base_chance=12 (repeatable)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        _serve(args)
        return 0
    return _odds(args)


if __name__ == "__main__":
    raise SystemExit(main())
