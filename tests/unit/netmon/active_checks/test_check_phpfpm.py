#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from tests.testlib.fake_transport import fake_client, http_reply

from netmon.active_checks import check_phpfpm

STATUS = """pool:                 www
process manager:      dynamic
start time:           17/Oct/2026:08:12:01 +0000
accepted conn:        1427
listen queue:         0
idle processes:       11
active processes:     1
total processes:      12
max active processes: 7
max children reached: %d
slow requests:        0
"""


def test_status(capsys: pytest.CaptureFixture[str]) -> None:
    client, transport = fake_client({"/status": http_reply(200, STATUS % 0, "OK")})

    assert check_phpfpm.main(["-H", "app"], client) == 0
    assert capsys.readouterr().out == (
        "OK: 1 active, 11 idle processes"
        " | active_processes=1 idle_processes=11 total_processes=12"
        " max_active_processes=7 max_children_reached=0\n"
    )
    assert transport.exchanges[0].port == 80


def test_max_children_reached(capsys: pytest.CaptureFixture[str]) -> None:
    client, _transport = fake_client({"/status": http_reply(200, STATUS % 3)})

    assert check_phpfpm.main(["-H", "app"], client) == 1
    out = capsys.readouterr().out
    assert out.startswith("WARNING: 1 active, 11 idle processes, max children reached 3 times(!)")
    assert "max_children_reached=3" in out


def test_unexpected_status_page(capsys: pytest.CaptureFixture[str]) -> None:
    client, _transport = fake_client({"/status": http_reply(200, "<html>It works!</html>")})

    assert check_phpfpm.main(["-H", "app"], client) == 0
    assert capsys.readouterr().out == "OK: Status page is responding\n"


@pytest.mark.parametrize(
    "body, exit_code, message",
    [
        ("pong", 0, "OK: Ping successful"),
        ("pong\n", 0, "OK: Ping successful"),
        ("File not found.", 2, "CRITICAL: Ping failed"),
    ],
)
def test_ping(
    body: str, exit_code: int, message: str, capsys: pytest.CaptureFixture[str]
) -> None:
    client, transport = fake_client({"/ping": http_reply(200, body, "OK")})

    assert check_phpfpm.main(["-H", "app", "--ping"], client) == exit_code
    assert capsys.readouterr().out == message + "\n"
    assert transport.exchanges[0].request_line == "GET /ping HTTP/1.1"


def test_custom_paths() -> None:
    client, transport = fake_client(
        {"/fpm-status": http_reply(200, STATUS % 0), "/fpm-ping": http_reply(200, "pong")}
    )

    assert check_phpfpm.main(["-H", "app", "--status-path", "/fpm-status"], client) == 0
    assert check_phpfpm.main(["-H", "app", "--ping", "--ping-path", "/fpm-ping"], client) == 0
    assert [e.request_line for e in transport.exchanges] == [
        "GET /fpm-status HTTP/1.1",
        "GET /fpm-ping HTTP/1.1",
    ]


def test_unreachable(capsys: pytest.CaptureFixture[str]) -> None:
    client, _transport = fake_client({})
    assert check_phpfpm.main(["-H", "app", "--ping"], client) == 2
    assert capsys.readouterr().out == "CRITICAL: Cannot connect to ping page: Connection refused\n"
