"""
Command line interface for Xplat Bans.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .analyzer import BanAnalyzer
from .config import LOG_LEVELS, REPORT_FORMATS, Config, get_default_config_path, load_config
from .exceptions import ConfigurationError, DefaultBanListError, ReportGenerationError
from .logging_config import setup_logging
from .matching.matcher import BanMatcher
from .matching.messages import DEFAULT_REASON
from .matching.suppression import SuppressionIndex
from .registry.loader import build_registry
from .reporting import get_reporter
from .version import get_full_name_with_version

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIAGNOSTICS = 1
EXIT_FATAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='xplat-bans',
        description='Flag uses of banned classes, packages and methods in typed syntax trees.'
    )
    parser.add_argument('--version', action='version', version=get_full_name_with_version())

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--bans', metavar='PATH_OR_URL',
                        help='Additional ban list overlaid on the bundled defaults')
    common.add_argument('--config', metavar='FILE', help='YAML configuration file')
    common.add_argument('--log-level', choices=LOG_LEVELS,
                        help='Logging level (default from config, else WARNING)')
    common.add_argument('--log-file', metavar='FILE', help='Also write the log to FILE')
    common.add_argument('-v', '--verbose', action='store_true', help='Verbose log format')

    subparsers = parser.add_subparsers(dest='command')
    subparsers.required = True

    check = subparsers.add_parser('check', parents=[common],
                                  help='Check typed tree documents for banned API usage')
    check.add_argument('trees', nargs='+', metavar='TREE', help='Typed tree document (JSON or YAML)')
    check.add_argument('-f', '--format', choices=REPORT_FORMATS,
                       help='Report format (default from config, else text)')
    check.add_argument('-o', '--output', metavar='FILE', help='Write the report to FILE')
    check.add_argument('-j', '--jobs', type=int, help='Number of worker threads')
    check.add_argument('--no-color', action='store_true', help='Disable colored text output')
    check.add_argument('--detailed', action='store_true', help='Include per-rule counts in text output')

    list_bans = subparsers.add_parser('list-bans', parents=[common],
                                      help='Print the merged ban list')
    list_bans.add_argument('-f', '--format', choices=['json', 'text'], default='json',
                           help='json: ban list document; text: one ban per line (default: json)')
    list_bans.add_argument('-o', '--output', metavar='FILE', help='Write the ban list to FILE')

    return parser


def _load_config(args: argparse.Namespace) -> Config:
    config = load_config(args.config or get_default_config_path())

    if args.bans:
        config.bans.override = args.bans
    if args.log_level:
        config.logging.level = args.log_level
    if args.log_file:
        config.logging.log_file = args.log_file
    if args.verbose:
        config.logging.verbose = True
    return config


def _write_output(content: str, output_path: Optional[str]) -> None:
    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(content)
    else:
        sys.stdout.write(content)


def run_check(args: argparse.Namespace, config: Config) -> int:
    format_name = args.format or config.output.default_format
    if format_name == 'excel' and not args.output:
        raise ConfigurationError("The excel format needs --output")

    jobs = args.jobs if args.jobs is not None else config.analysis.jobs
    if jobs < 1:
        raise ConfigurationError("--jobs must be a positive integer")

    registry = build_registry(override=config.bans.override, fetch_timeout=config.bans.fetch_timeout)
    matcher = BanMatcher(registry, SuppressionIndex(config.suppression.markers))
    analyzer = BanAnalyzer(matcher)

    result = analyzer.analyze_files(args.trees, jobs=jobs)

    if format_name == 'text':
        use_colors = False if args.no_color or args.output else config.output.use_colors
        reporter = get_reporter('text', use_colors=use_colors, detailed=args.detailed)
    else:
        reporter = get_reporter(format_name)

    content = reporter.generate_report(result, output_path=args.output)
    if args.output:
        logger.info(f"Report written to {args.output}")
    else:
        sys.stdout.write(content if content.endswith("\n") else content + "\n")

    if result.has_diagnostics:
        return EXIT_DIAGNOSTICS
    if result.errors:
        return EXIT_FATAL
    return EXIT_OK


def run_list_bans(args: argparse.Namespace, config: Config) -> int:
    registry = build_registry(override=config.bans.override, fetch_timeout=config.bans.fetch_timeout)
    if args.format == 'text':
        lines = []
        for entry in registry.entries():
            key = f"{entry.owner}#{entry.key}" if entry.owner else entry.key
            lines.append(f"{entry.section}\t{key}\t{entry.reason or DEFAULT_REASON}")
        content = "\n".join(lines) + "\n"
    else:
        content = json.dumps(registry.to_document(), indent=2, ensure_ascii=False) + "\n"
    _write_output(content, args.output)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = _load_config(args)
    except ConfigurationError as e:
        setup_logging()
        logger.error(f"Configuration error: {e}")
        return EXIT_FATAL

    setup_logging(level=config.logging.level, log_file=config.logging.log_file,
                  verbose=config.logging.verbose)

    commands = {
        'check': run_check,
        'list-bans': run_list_bans,
    }

    try:
        return commands[args.command](args, config)
    except DefaultBanListError as e:
        logger.error(f"Cannot start: {e}")
        return EXIT_FATAL
    except (ConfigurationError, ReportGenerationError) as e:
        logger.error(str(e))
        return EXIT_FATAL
    except OSError as e:
        logger.error(f"Could not write output: {e}")
        return EXIT_FATAL


if __name__ == '__main__':
    sys.exit(main())
