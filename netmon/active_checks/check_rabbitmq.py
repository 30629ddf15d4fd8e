#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_rabbitmq - Monitor a RabbitMQ broker through its management API"""

from collections.abc import Sequence
from urllib.parse import quote

from netmon.checkresults import CheckResult, render_metric, State
from netmon.extract import extract_json_nested_value, extract_json_number, json_has_key
from netmon.http_client import HTTPClient
from netmon.levels import Bound, check_levels, Direction, Levels

from ._common import (
    active_check_main,
    add_levels_arguments,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)

_OBJECT_TOTALS = ("queues", "exchanges", "connections", "channels")


class Args(HTTPCheckArgs):
    queue: None | str = None
    vhost: str = "/"
    warning: None | Bound = None
    critical: None | Bound = None


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser(
        "check_rabbitmq",
        __doc__ or "",
        default_port=15672,
        default_username="guest",
        default_password="guest",
    )
    parser.add_argument(
        "-q",
        "--queue",
        default=None,
        help="Check this queue instead of the broker overview",
    )
    parser.add_argument(
        "--vhost",
        default="/",
        help="Virtual host of the queue (default: /)",
    )
    add_levels_arguments(parser, "the number of messages in the queue")
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def _overview(body: str) -> CheckResult:
    totals = {name: _object_total(body, name) for name in _OBJECT_TOTALS}
    return CheckResult(
        State.OK,
        f"{totals['queues']} queues, {totals['exchanges']} exchanges,"
        f" {totals['connections']} connections",
        tuple(render_metric(name, value) for name, value in totals.items()),
    )


def _object_total(body: str, name: str) -> int:
    # a missing total counts as 0, like a missing number everywhere else
    value = extract_json_nested_value(body, f"object_totals.{name}")
    try:
        return int(float(value))
    except ValueError:
        return 0


def _queue(body: str, queue: str, levels: Levels) -> CheckResult:
    if not json_has_key(body, "messages"):
        return CheckResult(State.UNKNOWN, f'Queue "{queue}": no message count in the response')

    messages = extract_json_number(body, "messages")
    consumers = int(extract_json_number(body, "consumers"))
    return CheckResult.from_subresults(
        check_levels(
            messages,
            levels,
            Direction.UPPER,
            label=f'Queue "{queue}" messages',
            metric_name="messages",
        ),
        CheckResult(
            State.OK, f"{consumers} consumers", (render_metric("consumers", consumers),)
        ),
    )


def check_rabbitmq(args: Args, client: HTTPClient) -> CheckResult:
    if args.queue:
        path = f"/api/queues/{quote(args.vhost, safe='')}/{quote(args.queue, safe='')}"
    else:
        path = "/api/overview"

    response = client.get(args.request(path))
    if response.failed or response.status_code != 200:
        return connection_failed(response, "management API")

    if args.queue:
        return _queue(response.body, args.queue, Levels(args.warning, args.critical))
    return _overview(response.body)


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main(
        "check_rabbitmq", "RabbitMQ", parse_arguments, check_rabbitmq, argv, client
    )


if __name__ == "__main__":
    raise SystemExit(main())
