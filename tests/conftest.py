#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# pylint: disable=redefined-outer-name

from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.testlib.mock_server import MockServer

from netmon.utils.log import clear_console_logging


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    # The plug-ins attach a handler to the stderr of the moment. Don't let it
    # outlive the captured stream of a single test.
    yield
    clear_console_logging()


@pytest.fixture
def mock_server() -> Iterator[MockServer]:
    with MockServer() as server:
        yield server


@pytest.fixture(scope="module")
def https_mock_server(tmp_path_factory: pytest.TempPathFactory) -> Iterator[MockServer]:
    cert_dir: Path = tmp_path_factory.mktemp("certs")
    with MockServer(https=True, cert_dir=cert_dir) as server:
        yield server
