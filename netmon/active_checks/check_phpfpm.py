#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_phpfpm - Monitor a PHP-FPM pool through its status and ping pages"""

from collections.abc import Sequence

from netmon.checkresults import add_state_marker, CheckResult, render_metric, State
from netmon.extract import extract_text_number
from netmon.http_client import HTTPClient

from ._common import (
    active_check_main,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)

_PROCESS_COUNTERS = (
    "active processes",
    "idle processes",
    "total processes",
    "max active processes",
    "max children reached",
)


class Args(HTTPCheckArgs):
    ping: bool = False
    status_path: str = "/status"
    ping_path: str = "/ping"


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser("check_phpfpm", __doc__ or "", default_port=80)
    parser.add_argument(
        "--ping",
        action="store_true",
        help="Only check that the ping page answers with 'pong'",
    )
    parser.add_argument(
        "--status-path",
        default="/status",
        help="Path of the status page (default: /status)",
    )
    parser.add_argument(
        "--ping-path",
        default="/ping",
        help="Path of the ping page (default: /ping)",
    )
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def _check_ping(body: str) -> CheckResult:
    if "pong" in body:
        return CheckResult(State.OK, "Ping successful")
    return CheckResult(State.CRITICAL, "Ping failed")


def _check_status(page: str) -> CheckResult:
    counters = {label: extract_text_number(page, label) for label in _PROCESS_COUNTERS}
    metrics = tuple(
        render_metric(label.replace(" ", "_"), value)
        for label, value in counters.items()
        if value >= 0
    )

    active, idle = counters["active processes"], counters["idle processes"]
    if active >= 0 and idle >= 0:
        message = f"{active} active, {idle} idle processes"
    else:
        message = "Status page is responding"

    if counters["max children reached"] <= 0:
        return CheckResult(State.OK, message, metrics)

    message += ", " + add_state_marker(
        f"max children reached {counters['max children reached']} times", State.WARNING
    )
    return CheckResult(State.WARNING, message, metrics)


def check_phpfpm(args: Args, client: HTTPClient) -> CheckResult:
    response = client.get(args.request(args.ping_path if args.ping else args.status_path))
    if response.failed or response.status_code != 200:
        return connection_failed(response, "ping page" if args.ping else "status page")

    if args.ping:
        return _check_ping(response.body)
    return _check_status(response.body)


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main(
        "check_phpfpm", "PHP-FPM", parse_arguments, check_phpfpm, argv, client
    )


if __name__ == "__main__":
    raise SystemExit(main())
