"""
MavenKit CLI argument parser.

This module implements the command-line interface for MavenKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from mavenkit.core.exceptions import MavenKitError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("mavenkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)

# Subcommand name -> module exposing run(args)
COMMAND_MODULES = {
    "setup": "mavenkit.cli.commands.setup",
    "cache-key": "mavenkit.cli.commands.cache_key",
    "restore": "mavenkit.cli.commands.restore",
    "save": "mavenkit.cli.commands.save",
    "run": "mavenkit.cli.commands.run",
}

LOG_FORMATS = {
    logging.DEBUG: "%(levelname)s [%(name)s] %(message)s",
    logging.INFO: "%(message)s",
    logging.ERROR: "%(levelname)s: %(message)s",
}


class CLI:
    """MavenKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="mvnkit",
            description="MavenKit - JDK/Maven toolchain setup and dependency caching",
            epilog='Use "mvnkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"MavenKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./mavenkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )
        parser.add_argument(
            "--state-file",
            type=Path,
            metavar="PATH",
            help="Run state file shared by restore and save "
            "(default: per GitHub Actions run under <project-root>/.mavenkit/, "
            "otherwise in memory)",
        )
        parser.add_argument(
            "--java-version", metavar="VERSION", help="Override required Java version"
        )
        parser.add_argument(
            "--java-distribution",
            metavar="NAME",
            help="Override required Java distribution",
        )
        parser.add_argument(
            "--maven-version",
            metavar="VERSION",
            help="Override required Maven version",
        )
        parser.add_argument(
            "--no-cache",
            action="store_true",
            help="Disable dependency caching",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_setup_command(subparsers)
        self._add_cache_key_command(subparsers)
        self._add_restore_command(subparsers)
        self._add_save_command(subparsers)
        self._add_run_command(subparsers)

        return parser

    def _add_setup_command(self, subparsers):
        """Add 'setup' subcommand."""
        subparsers.add_parser(
            "setup",
            help="Set up Java and Maven",
            description="Detect, install if needed and verify Java and Maven",
        )

    def _add_cache_key_command(self, subparsers):
        """Add 'cache-key' subcommand."""
        subparsers.add_parser(
            "cache-key",
            help="Print dependency cache key",
            description="Print the dependency cache key and its restore chain",
        )

    def _add_restore_command(self, subparsers):
        """Add 'restore' subcommand."""
        subparsers.add_parser(
            "restore",
            help="Restore dependency cache",
            description="Restore the local Maven repository from the cache",
        )

    def _add_save_command(self, subparsers):
        """Add 'save' subcommand."""
        subparsers.add_parser(
            "save",
            help="Save dependency cache",
            description="Save the local Maven repository to the cache "
            "(once per key within a run)",
        )

    def _add_run_command(self, subparsers):
        """Add 'run' subcommand."""
        parser = subparsers.add_parser(
            "run",
            help="Run a build with toolchain setup and caching",
            description="Set up tools, restore the cache, run the build command "
            "and save the cache",
        )
        parser.add_argument(
            "build_command",
            nargs=argparse.REMAINDER,
            metavar="-- COMMAND",
            help="Build command (e.g., -- mvn -B verify)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Returns:
            Exit code: 0 on success, 1 on errors, 130 when interrupted
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except MavenKitError as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        if args.verbose:
            level = logging.DEBUG
        elif args.quiet:
            level = logging.ERROR
        else:
            level = logging.INFO

        logging.basicConfig(
            level=level,
            format=LOG_FORMATS[level],
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        module_name = COMMAND_MODULES.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    sys.exit(CLI().run())


if __name__ == "__main__":
    main()
