"""Command line argument parser."""

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import final

from modproxy.config.config import Config
from modproxy.config.settings import resolve_timeout
from modproxy.platform.logging import logger, setup_logger
from modproxy.ui.cli.args.options import CLIArgs, ConfigArgs, EscapeArgs, FilesArgs, InfoArgs


@final
class ArgumentParser:
    """Command line argument parser."""

    @staticmethod
    def create_parser() -> argparse.ArgumentParser:
        """Create argument parser.

        Returns:
            argparse.ArgumentParser: Configured argument parser.
        """
        parser = argparse.ArgumentParser(
            prog="modproxy",
            description="modproxy - Inspect module versions served by a module proxy.",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        subparsers = parser.add_subparsers(dest="command", required=True)

        info_parser = subparsers.add_parser(
            "info",
            help="Show the metadata the proxy records for a module version",
        )
        ArgumentParser._configure_fetch_parser(info_parser)
        _ = info_parser.add_argument(
            "--json",
            dest="as_json",
            action="store_true",
            help="Print the metadata as a JSON object",
        )

        files_parser = subparsers.add_parser(
            "files",
            help="List the files in a module version's zip archive",
        )
        ArgumentParser._configure_fetch_parser(files_parser)
        _ = files_parser.add_argument(
            "--strip-prefix",
            action="store_true",
            help="Hide the MODULE@VERSION/ prefix of each entry",
        )

        escape_parser = subparsers.add_parser(
            "escape",
            help="Print the escaped form of a module path and version",
        )
        ArgumentParser._configure_identity_parser(escape_parser)

        unescape_parser = subparsers.add_parser(
            "unescape",
            help="Print the raw form of an escaped module path and version",
        )
        ArgumentParser._configure_identity_parser(unescape_parser)

        config_parser = subparsers.add_parser(
            "config",
            help="Show the effective configuration",
        )
        _ = config_parser.add_argument(
            "--write",
            action="store_true",
            help="Write the effective configuration to the config file",
        )

        for subparser in (info_parser, files_parser, escape_parser, unescape_parser, config_parser):
            verbosity = subparser.add_mutually_exclusive_group()
            _ = verbosity.add_argument(
                "--verbose",
                action="store_true",
                help="Show HTTP request details",
            )
            _ = verbosity.add_argument(
                "--quiet",
                action="store_true",
                help="Suppress all output except errors",
            )

        return parser

    @staticmethod
    def process_args(args_list: Sequence[str] | None = None) -> CLIArgs:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).

        Returns:
            CLIArgs: Processed command line arguments.
        """
        parser = ArgumentParser.create_parser()
        parsed_args = parser.parse_args(args_list)

        is_quiet = bool(getattr(parsed_args, "quiet", False))
        is_verbose = bool(getattr(parsed_args, "verbose", False))

        if is_quiet:
            log_level = logging.ERROR
        elif is_verbose:
            log_level = logging.DEBUG
        else:
            log_level = logging.INFO

        configuration = Config.load()
        _ = setup_logger(log_file=configuration.log_file, console_level=log_level)

        command: str = parsed_args.command

        if command in {"info", "files"}:
            return ArgumentParser._process_fetch(parsed_args, configuration)

        if command in {"escape", "unescape"}:
            return EscapeArgs(
                command=command,
                module_path=parsed_args.module_path,
                version=parsed_args.version,
            )

        if command == "config":
            return ConfigArgs(command="config", write=parsed_args.write)

        logger.error("Unsupported command: %s", command)
        sys.exit(2)

    @staticmethod
    def _configure_fetch_parser(parser: argparse.ArgumentParser) -> None:
        """Apply shared configuration for subcommands that contact the proxy."""

        _ = parser.add_argument(
            "module_path",
            type=str,
            help="Module path, e.g. github.com/Azure/go-autorest",
            metavar="MODULE",
        )
        _ = parser.add_argument(
            "version",
            type=str,
            help="Module version, e.g. v1.0.0",
            metavar="VERSION",
        )
        _ = parser.add_argument(
            "--proxy",
            type=str,
            help="Module proxy base URL (defaults to the configured proxy_url)",
            metavar="URL",
        )
        _ = parser.add_argument(
            "--timeout",
            type=float,
            help="Request timeout in seconds (defaults to the configured timeout_seconds)",
            metavar="SECONDS",
        )

    @staticmethod
    def _configure_identity_parser(parser: argparse.ArgumentParser) -> None:
        _ = parser.add_argument("module_path", type=str, metavar="MODULE")
        _ = parser.add_argument("version", type=str, nargs="?", metavar="VERSION")

    @staticmethod
    def _process_fetch(parsed_args: argparse.Namespace, configuration: Config) -> InfoArgs | FilesArgs:
        proxy_url: str = parsed_args.proxy or configuration.proxy_url
        timeout: float = resolve_timeout(configuration)
        if parsed_args.timeout is not None:
            if parsed_args.timeout <= 0:
                logger.error("Timeout must be positive: %s", parsed_args.timeout)
                sys.exit(2)
            timeout = parsed_args.timeout

        if parsed_args.command == "info":
            return InfoArgs(
                command="info",
                module_path=parsed_args.module_path,
                version=parsed_args.version,
                proxy_url=proxy_url,
                timeout=timeout,
                as_json=parsed_args.as_json,
            )

        return FilesArgs(
            command="files",
            module_path=parsed_args.module_path,
            version=parsed_args.version,
            proxy_url=proxy_url,
            timeout=timeout,
            strip_prefix=parsed_args.strip_prefix,
        )
