"""Main CLI entry point for the search indexer."""

import argparse
import sys

from ..index_sync.deploy_config import DEPLOY_TYPES
from ..utils.logging_config import setup_logging
from .commands.build import build_command
from .commands.deploy import deploy_command
from .config import Config


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="docs-search-indexer",
        description="Docs Search Indexer - split rendered pages into search documents and deploy them",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Build command
    build_parser = subparsers.add_parser("build", help="Generate the search index from rendered pages")
    build_parser.add_argument("--config", help="Path to .env configuration file", default=None)
    build_parser.add_argument("--pages-dir", help="Directory of rendered pages (default: PAGES_DIR)")
    build_parser.add_argument("--output", help="Write the index to this JSON file (default: INDEX_OUTPUT_FILE)")
    build_parser.add_argument("--base-url", help="Prefix for page paths in document urls (default: BASE_URL)")
    build_parser.add_argument(
        "--no-content", action="store_true", help="Only index page excerpts when pages declare one"
    )
    build_parser.add_argument(
        "--exclude", action="append", default=None, metavar="GLOB", help="Exclude pages whose path matches GLOB"
    )
    build_parser.add_argument("--deploy-type", choices=DEPLOY_TYPES, help="Override DEPLOY_TYPE")
    build_parser.add_argument(
        "--everytime", action="store_true", help="Deploy on this build even when DEPLOY is not 'true'"
    )
    build_parser.add_argument("-v", "--verbose", action="store_true", help="Show per-page details")

    # Deploy command
    deploy_parser = subparsers.add_parser("deploy", help="Deploy a previously exported index file")
    deploy_parser.add_argument("index_file", help="JSON index file written by 'build'")
    deploy_parser.add_argument("--config", help="Path to .env configuration file", default=None)
    deploy_parser.add_argument("--deploy-type", choices=DEPLOY_TYPES, help="Override DEPLOY_TYPE")
    deploy_parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed progress")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Build shows progress by default (it's a long-running operation)
    setup_logging(verbose=args.command == "build" or args.verbose, debug=args.command == "build" and args.verbose)

    config = Config(args.config)

    if args.command == "build":
        return build_command(
            config=config,
            pages_dir=args.pages_dir,
            output=args.output,
            base_url=args.base_url,
            no_content=args.no_content,
            exclude=args.exclude,
            deploy_type=args.deploy_type,
            everytime=args.everytime,
        )
    elif args.command == "deploy":
        return deploy_command(config, args.index_file, deploy_type=args.deploy_type)

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
