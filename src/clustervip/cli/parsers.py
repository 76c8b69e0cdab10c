#!/usr/bin/env python3
"""
Argument parsers for the clustervip CLI.
"""

import argparse
import sys

from clustervip import __version__
from clustervip.cli.commands import cmd_delete, cmd_reconcile, cmd_show
from clustervip.cli.utils import console
from clustervip.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clustervip", description="Reconcile the VIP port and floating IP of a cluster"
    )
    parser.add_argument("--version", action="version", version=f"clustervip {__version__}")
    parser.add_argument(
        "--cloud-config",
        help="Cloud settings file (default: $CLUSTERVIP_CONFIG or ~/.config/clustervip/cloud.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    reconcile_parser = subparsers.add_parser(
        "reconcile", help="Create or reuse the VIP port and bind its floating IP"
    )
    reconcile_parser.add_argument("cluster_file", help="Cluster YAML file, updated in place")
    reconcile_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail when several ports carry the cluster port name",
    )
    reconcile_parser.set_defaults(func=cmd_reconcile)

    delete_parser = subparsers.add_parser("delete", aliases=["rm"], help="Delete the VIP port")
    delete_parser.add_argument("cluster_file", help="Cluster YAML file, updated in place")
    delete_parser.set_defaults(func=cmd_delete)

    show_parser = subparsers.add_parser("show", help="Show the recorded network status")
    show_parser.add_argument("cluster_file", help="Cluster YAML file")
    show_parser.set_defaults(func=cmd_show)

    return parser


def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(level=args.log_level, json_output=args.json_logs)

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        args.func(args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/]")
        sys.exit(1)


if __name__ == "__main__":
    main()
