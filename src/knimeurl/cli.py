#!/usr/bin/env python3
"""
KNIME URL resolver - command-line interface.

Resolves ``knime://`` URLs against an execution context described in YAML:
- resolve: Resolve a KNIME URL to its concrete URL
- absolute: Convert a KNIME URL to its mountpoint-absolute form
- link-types: List every KNIME URL form of the referenced item
- classify: Classify a KNIME URL without resolving it

Usage:
    knimeurl resolve knime://knime.workflow/data/in.csv --context ctx.yaml
    knimeurl resolve knime://knime.node/model.bin --node-dir ./MyFlow/Learner
    knimeurl absolute knime://knime.space/shared/model.bin --context ctx.yaml
    knimeurl link-types knime://knime.mountpoint/group/other --context ctx.yaml
    knimeurl classify "knime://My-Hub/Team Space/x.csv?version=3"
    knimeurl --help
"""

import argparse
import logging
import sys
from pathlib import Path

from knimeurl.commands.url import UrlCommand
from knimeurl.utils.config import ConfigError


def _add_common_arguments(parser: argparse.ArgumentParser, with_context: bool = True) -> None:
    parser.add_argument(
        "url",
        type=str,
        help="The KNIME URL"
    )
    if with_context:
        parser.add_argument(
            "--context", "-c",
            type=Path,
            help="YAML file describing the execution context (default: no context)"
        )
        parser.add_argument(
            "--node-dir",
            type=Path,
            help="Directory of the current node (default: enclosing workflow directory)"
        )
    parser.add_argument(
        "--format", "-f",
        type=str,
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knimeurl",
        description="KNIME URL resolver - turns knime:// URLs into concrete URLs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Resolve against a context file
  %(prog)s resolve knime://knime.workflow/data/in.csv -c ctx.yaml
  %(prog)s resolve "knime://knime.space/shared/model.bin?version=3" -c ctx.yaml
  %(prog)s resolve knime://knime.node/model.bin --node-dir ./MyFlow/Learner

  # Convert between link types
  %(prog)s absolute knime://knime.workflow/../other -c ctx.yaml
  %(prog)s link-types knime://knime.mountpoint/group/other -c ctx.yaml -f json

  # Inspect a URL
  %(prog)s classify "knime://My-Hub/Team Space/x.csv?version=most-recent"

Context file:
  context:
    type: hub-executor
    local_workflow_path: /tmp/job/workflow
    location:
      kind: hub
      repository_address: https://api.hub.example.com/repository
      workflow_path: /Team Space/Project/MyFlow
      default_mount_id: My-Hub
      space_path: /Team Space
        """
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # knimeurl resolve
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a KNIME URL to the concrete URL of the resource"
    )
    _add_common_arguments(resolve_parser)

    # knimeurl absolute
    absolute_parser = subparsers.add_parser(
        "absolute",
        help="Convert a KNIME URL to its mountpoint-absolute form"
    )
    _add_common_arguments(absolute_parser)

    # knimeurl link-types
    link_types_parser = subparsers.add_parser(
        "link-types",
        help="List every KNIME URL form the referenced item supports"
    )
    _add_common_arguments(link_types_parser)

    # knimeurl classify
    classify_parser = subparsers.add_parser(
        "classify",
        help="Show category, path and version of a KNIME URL"
    )
    _add_common_arguments(classify_parser, with_context=False)

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 0

    try:
        cmd = UrlCommand(
            context_path=getattr(args, "context", None),
            node_dir=getattr(args, "node_dir", None),
        )
    except ConfigError as e:
        print(f"Error loading context: {e}", file=sys.stderr)
        return 1

    if args.command == "resolve":
        return cmd.resolve(url=args.url, format=args.format)
    elif args.command == "absolute":
        return cmd.absolute(url=args.url, format=args.format)
    elif args.command == "link-types":
        return cmd.link_types(url=args.url, format=args.format)
    elif args.command == "classify":
        return cmd.classify(url=args.url, format=args.format)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
