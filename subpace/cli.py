"""Command-line interface for SUBPACE."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from subpace import __version__
from subpace.core.exceptions import ConfigurationError, InputError, ValidationError
from subpace.core.interfaces import ResolveStatus, ScanSummary
from subpace.utils.dns_utils import DNSUtils
from subpace.utils.error_handler import ErrorHandler


class CLI:
    """Command-line interface for SUBPACE."""

    def __init__(self):
        """Initialize the CLI."""
        self.parser = self._create_parser()
        self.dns_utils = DNSUtils()
        self.logger = logging.getLogger('subpace.cli')

    def _create_parser(self) -> argparse.ArgumentParser:
        """Create argument parser with all options.

        Returns:
            Configured argument parser
        """
        parser = argparse.ArgumentParser(
            prog='subpace',
            description='SUBPACE - Subdomain Paced Enumeration',
            epilog='Example: subpace -s words.txt -t example.com --qps 50 --ns 1.1.1.1:53'
        )

        # Required arguments
        parser.add_argument(
            '-s', '--subdomains',
            required=True,
            help='Path to a newline-delimited list of candidate subdomain labels'
        )

        parser.add_argument(
            '-t', '--target',
            required=True,
            help='Target domain to enumerate'
        )

        # Resolver options
        parser.add_argument(
            '-n', '--ns',
            help='Name server to query instead of the system resolvers (example: 1.1.1.1:53)'
        )

        parser.add_argument(
            '--tcp',
            action='store_true',
            help='Query the name server over TCP instead of UDP'
        )

        parser.add_argument(
            '--timeout',
            type=float,
            default=5.0,
            help='Seconds allowed for one lookup (default: 5.0)'
        )

        parser.add_argument(
            '--retries',
            type=int,
            default=0,
            help='Extra attempts for a lookup that timed out (default: 0)'
        )

        # Rate options
        parser.add_argument(
            '-q', '--qps',
            type=int,
            default=10,
            help='Queries per second (default: 10)'
        )

        parser.add_argument(
            '--max-in-flight',
            type=int,
            default=None,
            help='Maximum number of outstanding lookups (default: no limit)'
        )

        parser.add_argument(
            '--order',
            choices=['fifo', 'lifo'],
            default='fifo',
            help='Order in which candidates are dispatched (default: fifo)'
        )

        # Output options
        parser.add_argument(
            '--output',
            choices=['text', 'json', 'csv'],
            default='text',
            help='Output format (default: text)'
        )

        parser.add_argument(
            '--output-file',
            help='Write output to file instead of stdout'
        )

        parser.add_argument(
            '--show-ip',
            action='store_true',
            help='Show resolved IP addresses in text output'
        )

        parser.add_argument(
            '--progress',
            action='store_true',
            help='Show a progress bar on stderr'
        )

        # Verbosity options
        parser.add_argument(
            '-d', '--debug',
            action='store_true',
            help='Report queue, in-flight and completed counts on stderr'
        )

        parser.add_argument(
            '--quiet',
            action='store_true',
            help='Suppress all non-error diagnostics'
        )

        # Version
        parser.add_argument(
            '--version',
            action='version',
            version=f'%(prog)s {__version__}'
        )

        return parser

    def parse_arguments(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments.

        Args:
            args: Command-line arguments (None for sys.argv)

        Returns:
            Parsed arguments namespace
        """
        parsed_args = self.parser.parse_args(args)
        parsed_args.target = parsed_args.target.strip()
        return parsed_args

    def validate_input(self, args: argparse.Namespace) -> None:
        """Validate user input.

        Args:
            args: Parsed arguments namespace

        Raises:
            ConfigurationError: If any option is invalid
        """
        try:
            self.dns_utils.validate_domain(args.target)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e

        if args.qps < 1:
            raise ConfigurationError("Queries per second must be at least 1")

        if args.timeout <= 0:
            raise ConfigurationError("Timeout must be greater than 0")

        if args.retries < 0:
            raise ConfigurationError("Retries cannot be negative")

        if args.max_in_flight is not None and args.max_in_flight < 1:
            raise ConfigurationError("Maximum in-flight lookups must be at least 1")

        if args.debug and args.quiet:
            raise ConfigurationError("Cannot specify both --debug and --quiet")

        if args.ns:
            self.dns_utils.parse_nameserver(args.ns)

    def display_summary(self, summary: ScanSummary) -> None:
        """Log a one-line summary of the scan.

        Args:
            summary: Scan statistics
        """
        self.logger.info(
            f"{summary.completed}/{summary.total} names in {summary.elapsed:.2f}s: "
            f"{summary.counts[ResolveStatus.RESOLVED]} resolved, "
            f"{summary.counts[ResolveStatus.TIMEOUT]} timed out, "
            f"{summary.counts[ResolveStatus.CANT_RESOLVE]} unresolved"
        )


async def run_scan(args: argparse.Namespace) -> ScanSummary:
    """Build the scan components from parsed arguments and run the scan.

    Args:
        args: Validated arguments namespace

    Returns:
        ScanSummary of the finished scan

    Raises:
        InputError: If the wordlist cannot be read
        ConfigurationError: If the resolver cannot be set up
    """
    # Import here to keep --help fast
    from subpace.core.scheduler import Scheduler
    from subpace.discovery.dns_enumeration import ResolutionWorker, load_tasks
    from subpace.utils.dns_utils import build_resolver
    from subpace.utils.formatters import FormatterFactory, ResultWriter

    tasks = load_tasks(args.subdomains)
    resolver = build_resolver(args.ns, timeout=args.timeout, tcp=args.tcp)
    worker = ResolutionWorker(resolver, args.target, retries=args.retries)
    formatter = FormatterFactory.create_formatter(args.output, show_ip=args.show_ip)

    with ResultWriter(args.target, formatter, output_file=args.output_file) as writer:
        scheduler = Scheduler(
            tasks,
            worker,
            writer,
            qps=args.qps,
            order=args.order,
            max_in_flight=args.max_in_flight,
            debug=args.debug,
            show_progress=args.progress
        )
        return await scheduler.run()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    cli = CLI()
    args = cli.parse_arguments(argv)

    # Configure logging and error reporting based on verbosity
    error_handler = ErrorHandler(verbose=args.debug, quiet=args.quiet)

    try:
        cli.validate_input(args)
        summary = asyncio.run(run_scan(args))
        cli.display_summary(summary)
        return 0
    except InputError as e:
        error_handler.handle_error('input', str(e), e)
    except ConfigurationError as e:
        error_handler.handle_error('config', str(e), e)
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        return 130
    except OSError as e:
        error_handler.handle_error('system', f"Cannot write output: {e}", e)
    except Exception as e:
        error_handler.handle_error('unexpected', "An unexpected error occurred", e)
    return 1


if __name__ == '__main__':
    sys.exit(main())
