#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Sequence
from pathlib import Path
from types import ModuleType

import pytest
from pydantic import ValidationError

from tests.testlib.fake_transport import fake_client, http_reply

from netmon.active_checks import (
    check_apache,
    check_consul,
    check_elasticsearch,
    check_grafana,
    check_phpfpm,
    check_rabbitmq,
    check_vault,
)
from netmon.active_checks._common import (
    active_check_main,
    add_levels_arguments,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)
from netmon.checkresults import CheckResult, State
from netmon.http_client import HTTPClient, HTTPResponse
from netmon.levels import Bound
from netmon.utils.exceptions import NMBailOut


class Args(HTTPCheckArgs):
    warning: None | Bound = None
    critical: None | Bound = None


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = create_default_argument_parser("check_dummy", "Dummy", default_port=8080)
    add_levels_arguments(parser, "anything")
    return Args.model_validate(vars(parser.parse_args(argv)))


def test_defaults() -> None:
    args = parse_arguments(["-H", "srv"])
    assert args.hostname == "srv"
    assert args.port == 8080
    assert args.timeout == 10.0
    assert not args.ssl
    assert args.username is None
    assert args.resolve_password() is None
    assert args.verbose == 0
    assert not args.debug
    assert args.warning is None and args.critical is None


def test_all_options() -> None:
    args = parse_arguments(
        ["-H", "srv", "-p", "443", "-t", "2.5", "-S", "-u", "me", "-P", "pw", "-vv", "--debug"]
        + ["-w", "80", "-c", "10%"]
    )
    assert (args.port, args.timeout, args.ssl, args.username) == (443, 2.5, True, "me")
    assert args.resolve_password() == "pw"
    assert args.verbose == 2
    assert args.debug
    assert args.warning == Bound(80)
    assert args.critical == Bound(10, percent=True)


def test_hostname_is_required(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments([])
    assert excinfo.value.code == 3
    out, err = capsys.readouterr()
    assert out.startswith("UNKNOWN: check_dummy: ")
    assert "--hostname" in out
    assert out.count("\n") == 1
    assert err.startswith("usage: check_dummy")


def test_password_and_reference_exclude_each_other() -> None:
    with pytest.raises(SystemExit):
        parse_arguments(["-H", "srv", "-P", "pw", "--password-reference", "id:/file"])


def test_invalid_level_is_an_argument_error(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        parse_arguments(["-H", "srv", "-w", "lots"])
    assert excinfo.value.code == 3
    assert capsys.readouterr().out.startswith("UNKNOWN: check_dummy: argument -w/--warning")


@pytest.mark.parametrize("argv", [["-H", "srv", "-p", "0"], ["-H", "srv", "-t", "0"]])
def test_invalid_values_are_rejected(argv: list[str]) -> None:
    with pytest.raises(ValidationError):
        parse_arguments(argv)


def test_password_reference(tmp_path: Path) -> None:
    (pw_file := tmp_path / "pw").write_text("dummy:from-store\n")
    args = parse_arguments(["-H", "srv", "-u", "me", "--password-reference", f"dummy:{pw_file}"])
    assert args.resolve_password() == "from-store"
    assert args.request("/x").password == "from-store"


def test_invalid_password_reference_bails_out() -> None:
    args = parse_arguments(["-H", "srv", "--password-reference", "nonsense"])
    with pytest.raises(NMBailOut, match="expected ID:FILE"):
        args.resolve_password()


def test_request() -> None:
    request = parse_arguments(["-H", "srv", "-S", "-t", "3"]).request("/status")
    assert (request.host, request.port, request.path, request.use_tls, request.timeout) == (
        "srv",
        8080,
        "/status",
        True,
        3.0,
    )
    assert request.username is None and request.password is None


def test_request_without_username_drops_password() -> None:
    request = parse_arguments(["-H", "srv", "-P", "pw"]).request("/")
    assert request.password is None


@pytest.mark.parametrize(
    "response, message",
    [
        (HTTPResponse.from_error("Connection refused"), "Cannot connect to API: Connection refused"),
        (HTTPResponse(), "Cannot connect to API: no response"),
        (HTTPResponse(200, ""), "Empty response from API (HTTP 200)"),
        (HTTPResponse(404, "not found"), "Unexpected response from API (HTTP 404)"),
    ],
)
def test_connection_failed(response: HTTPResponse, message: str) -> None:
    assert connection_failed(response, "API") == CheckResult(State.CRITICAL, message)


def _run(
    check: object,
    argv: Sequence[str],
    client: HTTPClient | None = None,
) -> int:
    if client is None:
        client, _transport = fake_client({})
    return active_check_main("check_dummy", "Dummy", parse_arguments, check, argv, client)  # type: ignore[arg-type]


def test_main_prints_one_line(capsys: pytest.CaptureFixture[str]) -> None:
    def check(_args: Args, _client: HTTPClient) -> CheckResult:
        return CheckResult(State.WARNING, "Something", ("x=1",))

    assert _run(check, ["-H", "srv"]) == 1
    assert capsys.readouterr().out == "WARNING: Something | x=1\n"


def test_main_turns_exceptions_into_unknown(capsys: pytest.CaptureFixture[str]) -> None:
    def check(_args: Args, _client: HTTPClient) -> CheckResult:
        raise RuntimeError("boom")

    assert _run(check, ["-H", "srv"]) == 3
    assert capsys.readouterr().out == "UNKNOWN: Dummy check failed: boom\n"


@pytest.mark.parametrize(
    "argv, message",
    [
        (["-H", "srv", "-p", "0"], "invalid port: Input should be greater than or equal to 1"),
        (["-H", "srv", "-p", "70000"], "invalid port: Input should be less than or equal to 65535"),
        (["-H", "srv", "-t", "0"], "invalid timeout: Input should be greater than 0"),
    ],
)
def test_main_invalid_values_are_unknown(
    argv: list[str], message: str, capsys: pytest.CaptureFixture[str]
) -> None:
    def check(_args: Args, _client: HTTPClient) -> CheckResult:
        return CheckResult(State.OK, "unreachable")

    assert _run(check, argv) == 3
    assert capsys.readouterr().out == f"UNKNOWN: Dummy check failed: {message}\n"


def test_main_invalid_values_with_debug() -> None:
    def check(_args: Args, _client: HTTPClient) -> CheckResult:
        return CheckResult(State.OK, "unreachable")

    with pytest.raises(ValidationError):
        _run(check, ["-H", "srv", "-p", "0", "--debug"])


@pytest.mark.parametrize(
    "plugin",
    [
        check_apache,
        check_consul,
        check_elasticsearch,
        check_grafana,
        check_phpfpm,
        check_rabbitmq,
        check_vault,
    ],
)
@pytest.mark.parametrize("argv", [["-H", "srv", "-p", "0"], ["-H", "srv", "-t", "0"]])
def test_plugins_report_invalid_values_as_unknown(
    plugin: ModuleType, argv: list[str], capsys: pytest.CaptureFixture[str]
) -> None:
    client, transport = fake_client({})

    assert plugin.main(argv, client) == 3
    out = capsys.readouterr().out
    assert out.startswith("UNKNOWN: ")
    assert " check failed: invalid " in out
    assert out.count("\n") == 1
    assert not transport.exchanges


@pytest.mark.parametrize("plugin", [check_elasticsearch, check_vault])
def test_plugins_report_usage_errors_as_unknown(
    plugin: ModuleType, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        plugin.main(["-H", "srv", "-p", "eighty"])
    assert excinfo.value.code == 3
    out = capsys.readouterr().out
    assert out.startswith(f"UNKNOWN: {plugin.__name__.rsplit('.', 1)[-1]}: argument -p/--port")
    assert out.count("\n") == 1


def test_main_debug_lets_exceptions_through() -> None:
    def check(_args: Args, _client: HTTPClient) -> CheckResult:
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError, match="boom"):
        _run(check, ["-H", "srv", "--debug"])


def test_main_password_store_error_is_unknown(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    def check(args: Args, client: HTTPClient) -> CheckResult:
        client.get(args.request("/"))
        return CheckResult(State.OK, "unreachable")

    argv = ["-H", "srv", "-u", "me", "--password-reference", f"missing:{tmp_path / 'pw'}"]
    assert _run(check, argv) == 3
    assert capsys.readouterr().out.startswith("UNKNOWN: Cannot read password store")


def test_main_verbose_logs_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    client, _transport = fake_client({"/": http_reply(200, "ok")})

    def check(args: Args, client: HTTPClient) -> CheckResult:
        return CheckResult(State.OK, client.get(args.request("/")).body)

    assert _run(check, ["-H", "srv", "-vv"], client) == 0
    out, err = capsys.readouterr()
    assert out == "OK: ok\n"
    assert "DEBUG: GET http://srv:8080/" in err


def test_main_quiet_by_default(capsys: pytest.CaptureFixture[str]) -> None:
    client, _transport = fake_client({})

    def check(args: Args, client: HTTPClient) -> CheckResult:
        return connection_failed(client.get(args.request("/")), "API")

    assert _run(check, ["-H", "srv"], client) == 2
    out, err = capsys.readouterr()
    assert out == "CRITICAL: Cannot connect to API: Connection refused\n"
    assert err == ""


def test_main_falls_back_to_plain_http(capsys: pytest.CaptureFixture[str]) -> None:
    client, transport = fake_client({"/": http_reply(200, "ok")}, tls=False)

    def check(args: Args, client: HTTPClient) -> CheckResult:
        return CheckResult(State.OK, client.get(args.request("/")).body)

    assert _run(check, ["-H", "srv", "-S", "-p", "443"], client) == 0
    assert (transport.exchanges[0].port, transport.exchanges[0].use_tls) == (80, False)
    assert "check_dummy requires TLS support" in capsys.readouterr().err
