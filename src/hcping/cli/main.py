# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""hcping CLI: send a single ping for a check."""

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Any

from ..config import PingSettings, load_ping_settings
from ..errors import HealthchecksConfigError, failure_kind_to_reason
from ..log import setup_logging
from ..ping import PingEvent, PingReporter

_EVENTS = {
    "start": PingEvent.START,
    "success": PingEvent.SUCCESS,
    "fail": PingEvent.FAIL,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send a ping to healthchecks.io")
    parser.add_argument("check", help="Check UUID (defaults to $HEALTHCHECKS_TOKEN when '-')")
    parser.add_argument("event", choices=sorted(_EVENTS), help="Lifecycle event to report")
    parser.add_argument("--run-id", dest="run_id", help="Run ID pairing a start ping with its outcome")
    parser.add_argument(
        "--logs",
        metavar="FILE",
        help="Attach logs to a fail ping ('-' reads stdin)",
    )
    parser.add_argument("--user-agent", dest="user_agent", help="Custom User-Agent header")
    parser.add_argument("--ping-url", dest="ping_url", help="Ping endpoint base URL")
    parser.add_argument("--log-level", dest="log_level", help="Logging level (default: $HCPING_LOG_LEVEL)")
    parser.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    return parser


def _read_logs(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    with open(source, encoding="utf-8", errors="replace") as handle:
        return handle.read()


def _print_json(data: dict[str, Any]) -> None:
    json.dump(data, sys.stdout, indent=2, sort_keys=True, default=str)
    sys.stdout.write("\n")


def main(argv: list[str] | None = None, *, http_client: Any = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings: PingSettings = load_ping_settings()
    check = args.check
    if check == "-":
        check = os.getenv("HEALTHCHECKS_TOKEN", "")
        if not check:
            parser.error("check is '-' but HEALTHCHECKS_TOKEN is not set")

    event = _EVENTS[args.event]
    data = None
    if args.logs is not None:
        if event is not PingEvent.FAIL:
            parser.error("--logs is only valid with the 'fail' event")
        event = PingEvent.FAIL_WITH_LOGS
        try:
            data = _read_logs(args.logs)
        except OSError as exc:
            parser.error(f"cannot read logs from {args.logs}: {exc.strerror or exc}")

    try:
        reporter = PingReporter.create(
            check,
            args.ping_url,
            http_client=http_client,
            user_agent=args.user_agent or None,
            settings=settings,
        )
    except HealthchecksConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        outcome = reporter.ping(event, run_id=args.run_id, data=data)
    finally:
        if http_client is None:
            reporter.close()

    if args.json:
        _print_json(asdict(outcome))
    elif not outcome.succeeded:
        print(
            f"warning: {event.value} ping was not acknowledged after {outcome.attempts} attempt(s): "
            f"{failure_kind_to_reason(outcome.failure)}",
            file=sys.stderr,
        )
    return 0 if outcome.succeeded else 1


if __name__ == "__main__":
    raise SystemExit(main())
