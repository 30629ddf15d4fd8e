#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_grafana - Monitor a Grafana server"""

from collections.abc import Sequence
from typing import Literal

from netmon.checkresults import CheckResult, State
from netmon.extract import extract_json_value
from netmon.http_client import HTTPClient

from ._common import (
    active_check_main,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)


class Args(HTTPCheckArgs):
    check: Literal["health", "api", "version"] = "health"


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser("check_grafana", __doc__ or "", default_port=3000)
    parser.add_argument(
        "--check",
        choices=("health", "api", "version"),
        default="health",
        help="What to check, 'api' is an alias of 'health' (default: health)",
    )
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def check_grafana(args: Args, client: HTTPClient) -> CheckResult:
    response = client.get(args.request("/api/health"))
    if response.failed or response.status_code != 200:
        return connection_failed(response, "API")

    version = extract_json_value(response.body, "version")
    if args.check == "version":
        if not version:
            return CheckResult(State.UNKNOWN, "Version information not available")
        return CheckResult(State.OK, f"Version: {version}")

    database = extract_json_value(response.body, "database")
    if database not in ("ok", "up"):
        return CheckResult(State.CRITICAL, f"Database status: {database or 'unknown'}")
    if version:
        return CheckResult(State.OK, f"Database: {database}, Version: {version}")
    return CheckResult(State.OK, f"Database: {database}")


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main(
        "check_grafana", "Grafana", parse_arguments, check_grafana, argv, client
    )


if __name__ == "__main__":
    raise SystemExit(main())
