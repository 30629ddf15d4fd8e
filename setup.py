#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from setuptools import find_packages, setup

_PLUGINS = ("apache", "consul", "elasticsearch", "grafana", "phpfpm", "rabbitmq", "vault")

setup(
    name="netmon-plugins",
    version="1.0.0",
    packages=find_packages(include=["netmon", "netmon.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=["pydantic>=2"],
    extras_require={"test": ["pytest", "cryptography"]},
    entry_points={
        "console_scripts": [
            f"check_{name} = netmon.active_checks.check_{name}:main" for name in _PLUGINS
        ],
    },
)
