#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_vault - Monitor a HashiCorp Vault server"""

from collections.abc import Sequence
from typing import Literal

from netmon.checkresults import CheckResult, State
from netmon.extract import extract_json_value
from netmon.http_client import HTTPClient, HTTPResponse

from ._common import (
    active_check_main,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)

# /v1/sys/health answers with these codes while the node is operational
_STANDBY_CODES = {
    429: "standby",
    472: "disaster recovery secondary",
    473: "performance standby",
}


class Args(HTTPCheckArgs):
    check: Literal["health", "seal", "status"] = "health"


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser("check_vault", __doc__ or "", default_port=8200)
    parser.add_argument(
        "--check",
        choices=("health", "seal", "status"),
        default="health",
        help="What to check (default: health)",
    )
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def _check_health(response: HTTPResponse) -> CheckResult:
    if response.status_code == 200:
        if extract_json_value(response.body, "sealed") == "true":
            return CheckResult(State.CRITICAL, "Vault is sealed")
        if extract_json_value(response.body, "initialized") == "false":
            return CheckResult(State.WARNING, "Vault is not initialized")
        return CheckResult(State.OK, "Vault is healthy, initialized and unsealed")

    if (mode := _STANDBY_CODES.get(response.status_code)) is not None:
        return CheckResult(State.OK, f"Vault is in {mode} mode (HTTP {response.status_code})")

    if response.status_code == 503:
        return CheckResult(State.CRITICAL, "Vault is sealed")

    return CheckResult(State.CRITICAL, f"Unexpected status code: {response.status_code}")


def _check_seal(response: HTTPResponse) -> CheckResult:
    if response.status_code != 200:
        return CheckResult(
            State.CRITICAL, f"Cannot check seal status (HTTP {response.status_code})"
        )
    if extract_json_value(response.body, "sealed") == "true":
        return CheckResult(State.CRITICAL, "Vault is sealed")
    return CheckResult(State.OK, "Vault is unsealed")


def _check_status(response: HTTPResponse) -> CheckResult:
    if response.status_code == 200:
        return CheckResult(State.OK, "Vault is responding")
    return CheckResult(State.CRITICAL, f"Vault returned HTTP {response.status_code}")


def check_vault(args: Args, client: HTTPClient) -> CheckResult:
    path = "/v1/sys/seal-status" if args.check == "seal" else "/v1/sys/health"
    response = client.get(args.request(path))
    if response.failed:
        return connection_failed(response, "API server")

    if args.check == "seal":
        return _check_seal(response)
    if args.check == "status":
        return _check_status(response)
    return _check_health(response)


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main("check_vault", "Vault", parse_arguments, check_vault, argv, client)


if __name__ == "__main__":
    raise SystemExit(main())
