from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Sequence

from sharepoint_bridge.adapter import SharePointAdapter
from sharepoint_bridge.config import AdapterConfig
from sharepoint_bridge.data_types import BridgeRequest
from sharepoint_bridge.pagination import PAGE_NUMBER, PAGE_SIZE


def _parse_parameter(value: str) -> tuple[str, str]:
    name, sep, parameter_value = value.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(
            f"parameters must look like NAME=VALUE, got '{value}'"
        )
    return name, parameter_value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sharepoint-bridge",
        description="Query SharePoint lists and emit JSON to stdout.",
    )
    parser.add_argument(
        "operation",
        choices=("count", "retrieve", "search"),
        help="Bridge operation to run.",
    )
    parser.add_argument(
        "--structure",
        default="Lists",
        help="Structure to query (default: Lists).",
    )
    parser.add_argument(
        "--query",
        default=None,
        help='Qualification, e.g. "$filter=Title eq \'<%%= parameter["Title"] %%>\'".',
    )
    parser.add_argument(
        "--param",
        dest="parameters",
        action="append",
        type=_parse_parameter,
        default=[],
        metavar="NAME=VALUE",
        help="Bind a qualification parameter. May be repeated.",
    )
    parser.add_argument(
        "--fields",
        default=None,
        help="Comma separated list of fields to return.",
    )
    parser.add_argument("--page-size", default=None, help="Search page size.")
    parser.add_argument("--page-number", default=None, help="Search page number.")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log request details to stderr.",
    )
    return parser


def _build_request(args: argparse.Namespace) -> BridgeRequest:
    fields = None
    if args.fields is not None:
        fields = [f.strip() for f in args.fields.split(",") if f.strip()]
    metadata = {}
    if args.page_size is not None:
        metadata[PAGE_SIZE] = args.page_size
    if args.page_number is not None:
        metadata[PAGE_NUMBER] = args.page_number
    return BridgeRequest(
        structure=args.structure,
        query=args.query,
        parameters=dict(args.parameters),
        fields=fields,
        metadata=metadata or None,
    )


def main(
    argv: Sequence[str] | None = None,
    *,
    adapter: SharePointAdapter | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        if adapter is None:
            adapter = SharePointAdapter(AdapterConfig.from_env())
        request = _build_request(args)
        operation = getattr(adapter, args.operation)
        json.dump(operation(request).to_json(), sys.stdout)
        sys.stdout.write("\n")
        return 0
    except Exception as exc:
        print(f"sharepoint-bridge: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
