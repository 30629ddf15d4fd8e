#!/usr/bin/env python3
# Copyright (C) 2025 Checkmk GmbH - License: GNU General Public License v2
# This file is part of Checkmk (https://checkmk.com). It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_elasticsearch - Monitor the health of an Elasticsearch cluster"""

from collections.abc import Sequence

from netmon.checkresults import CheckResult, render_metric, State
from netmon.extract import extract_json_number, extract_json_value, json_has_key
from netmon.http_client import HTTPClient
from netmon.levels import Bound, check_levels, Direction, Levels

from ._common import (
    active_check_main,
    add_levels_arguments,
    connection_failed,
    create_default_argument_parser,
    HTTPCheckArgs,
)

_STATUS_STATES = {
    "green": State.OK,
    "yellow": State.WARNING,
    "red": State.CRITICAL,
}


class Args(HTTPCheckArgs):
    warning: None | Bound = None
    critical: None | Bound = None


def parse_arguments(sys_args: Sequence[str]) -> Args:
    parser = create_default_argument_parser(
        "check_elasticsearch", __doc__ or "", default_port=9200
    )
    add_levels_arguments(parser, "the number of unassigned shards")
    return Args.model_validate(vars(parser.parse_args(sys_args)))


def check_cluster_health(args: Args, client: HTTPClient) -> CheckResult:
    response = client.get(args.request("/_cluster/health"))
    if response.failed or response.status_code != 200:
        return connection_failed(response, "cluster")

    body = response.body
    status = extract_json_value(body, "status")
    cluster_name = extract_json_value(body, "cluster_name")
    nodes = int(extract_json_number(body, "number_of_nodes"))
    data_nodes = int(extract_json_number(body, "number_of_data_nodes"))

    state = _STATUS_STATES.get(status, State.UNKNOWN)
    summary = CheckResult(
        state,
        f'Cluster "{cluster_name}" status: {status or "unknown"}'
        f" ({nodes} nodes, {data_nodes} data nodes)",
        (render_metric("nodes", nodes), render_metric("data_nodes", data_nodes)),
    )

    if (args.warning is None and args.critical is None) or not json_has_key(
        body, "unassigned_shards"
    ):
        return summary

    return CheckResult.from_subresults(
        summary,
        check_levels(
            extract_json_number(body, "unassigned_shards"),
            Levels(args.warning, args.critical),
            Direction.UPPER,
            label="Unassigned shards",
            metric_name="unassigned_shards",
        ),
    )


def main(argv: Sequence[str] | None = None, client: HTTPClient | None = None) -> int:
    return active_check_main(
        "check_elasticsearch",
        "Elasticsearch",
        parse_arguments,
        check_cluster_health,
        argv,
        client,
    )


if __name__ == "__main__":
    raise SystemExit(main())
