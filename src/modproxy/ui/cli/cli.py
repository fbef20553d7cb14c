"""Command line interface for modproxy."""

import sys
from typing import final

from modproxy.config.config import Config
from modproxy.config.settings import resolve_user_agent
from modproxy.platform.logging import logger
from modproxy.platform.proxy import (
    InvalidInputError,
    NotFoundError,
    ProxyClient,
    ProxyClientError,
    decode_module_path_and_version,
    encode_module_path_and_version,
    escape_path,
    unescape_path,
)
from modproxy.platform.proxy.http_client import Deadline
from modproxy.ui.cli.args import ArgumentParser
from modproxy.ui.cli.args.options import CLIArgs, ConfigArgs, EscapeArgs, FilesArgs, InfoArgs
from modproxy.ui.cli.display import ResultDisplay


@final
class CommandProcessor:
    """Command line interface processor."""

    @staticmethod
    def process_command(args_list: list[str] | None = None) -> None:
        """Process command line arguments.

        Args:
            args_list: List of command line arguments (for testing).
        """
        try:
            args: CLIArgs = ArgumentParser.process_args(args_list)
            display = ResultDisplay()

            if isinstance(args, (InfoArgs, FilesArgs)):
                CommandProcessor._fetch(args, display)
            elif isinstance(args, EscapeArgs):
                CommandProcessor._escape(args, display)
            elif isinstance(args, ConfigArgs):
                CommandProcessor._config(args, display)
            else:
                raise TypeError(f"Unsupported arguments: {args!r}")

        except NotFoundError as e:
            logger.error("Not found on the proxy: %s", e)
            sys.exit(1)
        except InvalidInputError as e:
            logger.error("Invalid module path or version: %s", e)
            sys.exit(1)
        except ProxyClientError as e:
            logger.error("%s", e)
            sys.exit(1)
        except KeyboardInterrupt:
            logger.info("\nOperation cancelled by user")
            sys.exit(130)
        except Exception as e:
            logger.error("An unexpected error occurred: %s", str(e))
            sys.exit(1)

    @staticmethod
    def _fetch(args: InfoArgs | FilesArgs, display: ResultDisplay) -> None:
        client = ProxyClient(
            args.proxy_url,
            timeout=args.timeout,
            user_agent=resolve_user_agent(Config.load()),
        )
        deadline = Deadline(args.timeout)

        if isinstance(args, InfoArgs):
            info = client.get_info(args.module_path, args.version, deadline=deadline)
            display.show_info(args.module_path, info, as_json=args.as_json)
            return

        with client.get_zip(args.module_path, args.version, deadline=deadline) as archive:
            display.show_files(
                archive,
                prefix=f"{args.module_path}@{args.version}/",
                strip_prefix=args.strip_prefix,
            )

    @staticmethod
    def _escape(args: EscapeArgs, display: ResultDisplay) -> None:
        if args.command == "escape":
            if args.version is None:
                display.show_identity(escape_path(args.module_path), None)
                return
            path, version = encode_module_path_and_version(args.module_path, args.version)
            display.show_identity(path, version)
            return

        if args.version is None:
            display.show_identity(unescape_path(args.module_path), None)
            return
        path, version = decode_module_path_and_version(args.module_path, args.version)
        display.show_identity(path, version)

    @staticmethod
    def _config(args: ConfigArgs, display: ResultDisplay) -> None:
        configuration = Config.load()
        display.show_config(configuration)
        if args.write:
            _ = configuration.save()


def main() -> int:
    """Main entry point.

    Returns:
        int: Process exit code (0 on success). Failures exit through
        ``sys.exit`` inside command processing.
    """
    CommandProcessor.process_command()
    return 0
