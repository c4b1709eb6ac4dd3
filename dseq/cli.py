"""Command-line entry point."""

from __future__ import annotations

import argparse
import sys

from dseq.load import run_load
from dseq.sequencer import APP_VERSION


def _uint(text):
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"invalid unsigned integer: {text!r}")
    return value


def _load(args):
    nodes = args.nodes.split(",")
    try:
        report = run_load(nodes, args.requests, args.concurrency)
    except ValueError as exc:
        print(f"dseq: {exc}", file=sys.stderr)
        return 1
    print(report)
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="dseq")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s version {APP_VERSION}"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    load = commands.add_parser("load", help="Send test transaction requests")
    load.add_argument(
        "--nodes",
        "-n",
        required=True,
        help="Host(&port) of nodes to send load requests, in CSV format",
    )
    load.add_argument(
        "--requests", "-r", type=_uint, default=10, help="Total number of requests to send"
    )
    load.add_argument(
        "--concurrency", "-c", type=_uint, default=1, help="Number of concurrent requests"
    )
    load.set_defaults(handler=_load)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())