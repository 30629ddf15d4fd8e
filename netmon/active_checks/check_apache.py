#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_apache - Monitor an Apache web server through mod_status"""

from collections.abc import Sequence

from netmon.checkresults import CheckResult, render_metric, State
from netmon.extract import extract_text_number
from netmon.http_client import HTTPClient
from netmon.levels import Bound, check_levels, Direction, Levels

from ._common import (
    active_check_main,
    add_levels_arguments,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)

# label on the status page -> metric name
_COUNTERS = {
    "Total Accesses": "total_accesses",
    "Total kBytes": "total_kbytes",
    "ReqPerSec": "req_per_sec",
    "BytesPerSec": "bytes_per_sec",
}


class Args(HTTPCheckArgs):
    url: str = "/server-status?auto"
    warning: None | Bound = None
    critical: None | Bound = None


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser("check_apache", __doc__ or "", default_port=80)
    parser.add_argument(
        "--url",
        default="/server-status?auto",
        help="Path of the status page (default: /server-status?auto)",
    )
    add_levels_arguments(parser, "the number of busy workers")
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def check_apache(args: Args, client: HTTPClient) -> CheckResult:
    response = client.get(args.request(args.url))
    if response.failed or response.status_code != 200:
        return connection_failed(response, "server-status")

    page = response.body
    busy = extract_text_number(page, "BusyWorkers")
    idle = extract_text_number(page, "IdleWorkers")

    metrics = tuple(
        render_metric(name, value)
        for label, name in _COUNTERS.items()
        if (value := extract_text_number(page, label)) >= 0
    )
    if busy < 0 or idle < 0:
        return CheckResult(State.OK, "Server is responding", metrics)

    return CheckResult.from_subresults(
        check_levels(
            busy,
            Levels(args.warning, args.critical),
            Direction.UPPER,
            label="Busy workers",
            metric_name="busy_workers",
            total=busy + idle,
        ),
        CheckResult(State.OK, f"Idle workers: {idle}", (render_metric("idle_workers", idle),)),
        CheckResult(State.OK, "", metrics),
    )


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main(
        "check_apache", "Apache", parse_arguments, check_apache, argv, client
    )


if __name__ == "__main__":
    raise SystemExit(main())
