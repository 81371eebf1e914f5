#!/usr/bin/env python3
"""
=============================================================================
SPA BUNDLE BUILDER - COMMAND LINE
=============================================================================
Assembles the release bundle into the build directory.

Usage:
    spa-bundle build                          # Build from the current directory
    spa-bundle build --source-root ../app     # Build another checkout
    spa-bundle build --version 1.2.3          # Override package.json version
    spa-bundle build --log-format json        # Machine-readable logs (CI)

Exit code is 0 when the bundle is complete, 1 when any stage failed.
"""

import argparse
import sys
from typing import List, Optional

import structlog
from dependency_injector import providers

from bundler import __version__
from bundler.core.domain.exceptions import BuildError
from bundler.shared.config import Settings
from bundler.shared.container import container
from bundler.shared.logging_config import configure_logging
from bundler.shared.observability import setup_observability

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="spa-bundle",
        description="Build a self-contained single-page application bundle.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Run the full build pipeline")
    build.add_argument("--source-root", help="Project checkout to build (default: SOURCE_ROOT)")
    build.add_argument("--build-dir", help="Output directory relative to the source root")
    build.add_argument(
        "--version",
        dest="project_version",
        help="Version stamped into the manifest instead of package.json's",
    )
    build.add_argument(
        "--lenient-inline",
        action="store_true",
        help="Skip missing inline targets instead of failing",
    )
    build.add_argument("--log-format", choices=["console", "json"])
    build.add_argument("--log-level")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.source_root:
        overrides["SOURCE_ROOT"] = args.source_root
    if args.build_dir:
        overrides["BUILD_DIR"] = args.build_dir
    if args.project_version:
        overrides["PROJECT_VERSION"] = args.project_version
    if args.lenient_inline:
        overrides["INLINE_STRICT"] = False
    if args.log_format:
        overrides["LOG_FORMAT"] = args.log_format
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level
    return Settings(**overrides)


def cmd_build(args: argparse.Namespace) -> int:
    settings = settings_from_args(args)
    configure_logging(settings)
    setup_observability(settings)

    with container.settings.override(providers.Object(settings)):
        container.layout.reset()
        use_case = container.build_bundle_use_case()
        try:
            report = use_case.execute()
        except BuildError as e:
            logger.error(
                "build_failed",
                error=e.message,
                error_type=type(e).__name__,
                exc_info=True,
            )
            return 1

    logger.info("build_summary", version=report.version, **report.stage_durations)
    print("\nBuild complete.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "build":
        return cmd_build(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
