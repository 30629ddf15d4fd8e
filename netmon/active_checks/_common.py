#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Common code of the HTTP speaking active checks"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Sequence
from typing import NoReturn, TypeVar

from pydantic import BaseModel, Field, ValidationError

from netmon.checkresults import CheckResult, output_check_result, State
from netmon.dependencies import fall_back_to_plain
from netmon.http_client import HTTPClient, HTTPRequest, HTTPResponse
from netmon.levels import parse_bound
from netmon.utils import password_store
from netmon.utils.exceptions import NMBailOut, NMGeneralException
from netmon.utils.log import logger, setup_console_logging, verbosity_to_log_level

__all__ = [
    "active_check_main",
    "add_levels_arguments",
    "connection_failed",
    "create_default_argument_parser",
    "HTTPCheckArgs",
]

ArgsT = TypeVar("ArgsT", bound="HTTPCheckArgs")


class HTTPCheckArgs(BaseModel):
    hostname: str = Field(min_length=1)
    port: int = Field(ge=1, le=65535)
    timeout: float = Field(gt=0)
    ssl: bool = False
    username: None | str = None
    password: None | str = None
    password_reference: None | str = None
    verbose: int = 0
    debug: bool = False

    def resolve_password(self) -> None | str:
        # a reference wins over a plugin's default password
        if self.password_reference is not None:
            try:
                pw_id, pw_file = password_store.split_reference(self.password_reference)
            except ValueError as e:
                raise NMBailOut(str(e)) from e
            return password_store.lookup(pw_file, pw_id)
        return self.password

    def request(self, path: str) -> HTTPRequest:
        return HTTPRequest(
            host=self.hostname,
            port=self.port,
            path=path,
            use_tls=self.ssl,
            timeout=self.timeout,
            username=self.username or None,
            password=self.resolve_password() if self.username else None,
        )


class _ArgumentParser(argparse.ArgumentParser):
    """Usage errors are reported as UNKNOWN status line and exit code"""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        output_check_result(CheckResult(State.UNKNOWN, f"{self.prog}: {message}"))
        raise SystemExit(int(State.UNKNOWN))


def create_default_argument_parser(
    prog: str,
    description: str,
    *,
    default_port: int,
    default_username: str | None = None,
    default_password: str | None = None,
) -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "-H",
        "--hostname",
        required=True,
        metavar="HOST",
        help="Host name or IP address of the service",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=default_port,
        help=f"Port of the service (default: {default_port})",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=float,
        default=10.0,
        metavar="SECONDS",
        help="Seconds before the connection times out (default: 10)",
    )
    parser.add_argument("-S", "--ssl", action="store_true", help="Use HTTPS")
    parser.add_argument(
        "-u",
        "--username",
        default=default_username,
        help="Username for HTTP basic authentication",
    )

    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "-P",
        "--password",
        default=default_password,
        help="Password for HTTP basic authentication",
    )
    group.add_argument(
        "--password-reference",
        default=None,
        metavar="ID:FILE",
        help="Password store reference to the password for HTTP basic authentication",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr, repeat for more details",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode: let Python exceptions come through",
    )
    return parser


def add_levels_arguments(parser: argparse.ArgumentParser, what: str) -> None:
    parser.add_argument(
        "-w",
        "--warning",
        type=parse_bound,
        default=None,
        metavar="LEVEL",
        help=f"Warning level for {what} (number or percentage, e.g. 80 or 10%%)",
    )
    parser.add_argument(
        "-c",
        "--critical",
        type=parse_bound,
        default=None,
        metavar="LEVEL",
        help=f"Critical level for {what} (number or percentage, e.g. 90 or 5%%)",
    )


def prepare_connection(plugin_name: str, args: ArgsT, client: HTTPClient) -> ArgsT:
    use_tls, port = fall_back_to_plain(plugin_name, args.ssl, args.port, client.transport.tls)
    if (use_tls, port) == (args.ssl, args.port):
        return args
    return args.model_copy(update={"ssl": use_tls, "port": port})


def connection_failed(response: HTTPResponse, what: str) -> CheckResult:
    """The result for "no usable answer", shared by all checks"""
    if response.status_code == 0:
        reason = response.error or "no response"
        return CheckResult(State.CRITICAL, f"Cannot connect to {what}: {reason}")
    if not response.body:
        return CheckResult(
            State.CRITICAL, f"Empty response from {what} (HTTP {response.status_code})"
        )
    return CheckResult(
        State.CRITICAL, f"Unexpected response from {what} (HTTP {response.status_code})"
    )


def _invalid_arguments(e: ValidationError) -> str:
    """One line for all rejected option values

    >>> try:
    ...     HTTPCheckArgs(hostname="h", port=0, timeout=1)
    ... except ValidationError as e:
    ...     print(_invalid_arguments(e))
    invalid port: Input should be greater than or equal to 1
    """
    return "; ".join(
        f"invalid {'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in e.errors()
    )


def _setup_logging(verbosity: int) -> None:
    if verbosity:
        setup_console_logging()
    logger.setLevel(verbosity_to_log_level(verbosity))


def active_check_main(
    prog: str,
    title: str,
    parse_arguments: Callable[[Sequence[str]], ArgsT],
    check: Callable[[ArgsT, HTTPClient], CheckResult],
    argv: Sequence[str] | None = None,
    client: HTTPClient | None = None,
) -> int:
    """Run one check, print exactly one status line and return the exit code"""
    argv = sys.argv[1:] if argv is None else argv
    try:
        args = parse_arguments(argv)
    except ValidationError as e:
        if "--debug" in argv:
            raise
        result = CheckResult(State.UNKNOWN, f"{title} check failed: {_invalid_arguments(e)}")
        output_check_result(result)
        return int(result.state)
    _setup_logging(args.verbose)

    client = HTTPClient() if client is None else client
    try:
        result = check(prepare_connection(prog, args, client), client)
    except (NMBailOut, NMGeneralException) as e:
        result = CheckResult(State.UNKNOWN, str(e))
    except Exception as e:
        if args.debug:
            raise
        logger.debug("%s failed", prog, exc_info=True)
        result = CheckResult(State.UNKNOWN, f"{title} check failed: {e}")

    output_check_result(result)
    return int(result.state)
