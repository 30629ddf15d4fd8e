#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# This file initializes the pytest environment

from pathlib import Path

import pytest

#
# With "-T TYPE" only the tests of one type are executed, the others are
# skipped. The type of a test is the directory below tests/ it lives in.
# Doctests of the package count as unit tests.
#

test_types = [
    "unit",
    "integration",
]


def pytest_addoption(parser):
    """Register the -T option to pytest"""
    parser.addoption(
        "-T",
        action="store",
        metavar="TYPE",
        default=None,
        help="Run tests of the given TYPE only. Available types are: %s" % ", ".join(test_types),
    )


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "type(TYPE): Mark TYPE of test. Available: %s" % ", ".join(test_types)
    )


def pytest_collection_modifyitems(items: list[pytest.Item], config: pytest.Config) -> None:
    """Mark collected test types based on their location"""
    for item in items:
        type_marker = item.get_closest_marker("type")
        if type_marker and type_marker.args:
            continue  # Do not modify manually set marks
        repo_rel_path = Path("%s" % item.reportinfo()[0]).relative_to(Path(__file__).parent)
        if repo_rel_path.parts[0] == "tests" and repo_rel_path.parts[1] in test_types:
            ty = repo_rel_path.parts[1]
        elif isinstance(item, pytest.DoctestItem):
            ty = "unit"
        else:
            raise Exception(f"Test in {repo_rel_path} not TYPE marked: {item!r}")

        item.add_marker(pytest.mark.type.with_args(ty))


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip tests of unwanted types"""
    if not (wanted := item.config.getoption("-T")):
        return

    test_type = item.get_closest_marker("type")
    if test_type is None:
        raise Exception("Test is not TYPE marked: %s" % item)

    if test_type.args[0] != wanted:
        pytest.skip("Not testing type %r" % test_type.args[0])
