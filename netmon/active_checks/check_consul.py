#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_consul - Monitor a Consul agent and its cluster"""

import re
from collections.abc import Sequence
from typing import Literal

from netmon.checkresults import CheckResult, render_metric, State
from netmon.extract import extract_json_value
from netmon.http_client import HTTPClient
from netmon.levels import Bound, check_levels, Direction, Levels

from ._common import (
    active_check_main,
    add_levels_arguments,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)

_PATHS = {
    "health": "/v1/health/state/any",
    "leader": "/v1/status/leader",
    "members": "/v1/agent/members",
    "services": "/v1/agent/services",
}


class Args(HTTPCheckArgs):
    check: Literal["health", "leader", "members", "services"] = "health"
    warning: None | Bound = None
    critical: None | Bound = None


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser("check_consul", __doc__ or "", default_port=8500)
    parser.add_argument(
        "--check",
        choices=tuple(_PATHS),
        default="health",
        help="What to check (default: health)",
    )
    add_levels_arguments(parser, "the minimum number of cluster members")
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def _count_keys(body: str, key: str) -> int:
    return len(re.findall(r'"%s"\s*:' % re.escape(key), body))


def _check_health(body: str) -> CheckResult:
    if re.search(r'"Status"\s*:\s*"critical"', body):
        return CheckResult(State.CRITICAL, "Health checks in critical state")
    if re.search(r'"Status"\s*:\s*"warning"', body):
        return CheckResult(State.WARNING, "Health checks in warning state")
    return CheckResult(State.OK, "All health checks passing")


def _check_leader(body: str) -> CheckResult:
    # the endpoint answers with a bare JSON string like "10.1.2.3:8300"
    leader = extract_json_value(body, "leader") or body.strip().strip('"')
    if not leader:
        return CheckResult(State.CRITICAL, "No leader elected")
    return CheckResult(State.OK, f"Leader: {leader}")


def _check_members(body: str, levels: Levels) -> CheckResult:
    members = _count_keys(body, "Name")
    if levels.warn is None and levels.crit is None:
        return CheckResult(
            State.OK, f"{members} cluster members", (render_metric("members", members),)
        )
    return check_levels(
        members, levels, Direction.LOWER, label="Cluster members", metric_name="members"
    )


def _check_services(body: str) -> CheckResult:
    services = _count_keys(body, "ID")
    return CheckResult(
        State.OK, f"{services} services registered", (render_metric("services", services),)
    )


def check_consul(args: Args, client: HTTPClient) -> CheckResult:
    response = client.get(args.request(_PATHS[args.check]))
    if response.failed or response.status_code != 200:
        return connection_failed(response, "API")

    match args.check:
        case "leader":
            return _check_leader(response.body)
        case "members":
            return _check_members(response.body, Levels(args.warning, args.critical))
        case "services":
            return _check_services(response.body)
    return _check_health(response.body)


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main(
        "check_consul", "Consul", parse_arguments, check_consul, argv, client
    )


if __name__ == "__main__":
    raise SystemExit(main())
