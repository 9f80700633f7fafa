"""
cspkit CLI
"""
import sys
import argparse
import json

from cspkit.config.loader import get_settings
from cspkit.config.presets import load_preset, preset_names
from cspkit.errors import CspError
from cspkit.logging_config import setup_logging
from cspkit.models import Mode, OutputMode
from cspkit.parser import CspParser


def build_parser():
    parser = argparse.ArgumentParser(
        prog="cspkit",
        description="cspkit - Content-Security-Policy builder and parser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print the canonical form of a policy
  python -m cspkit parse "script-src 'self' https://cdn.example.com; default-src 'none'"

  # Drop invalid quoted tokens instead of failing
  python -m cspkit parse "default-src 'self' 'unsafe-inline'" --loose

  # Validate a full header, exit code 1 when invalid
  python -m cspkit check "Content-Security-Policy: sandbox allow-forms"

  # Render a named preset as a report-only header
  python -m cspkit preset strict --report-only
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Parse command
    parse_parser = subparsers.add_parser('parse', help='Parse and print a policy in canonical form')
    parse_parser.add_argument('policy', help='Header or header value to parse')
    parse_parser.add_argument('--loose', action='store_true',
                              help='Drop invalid quoted tokens instead of failing')
    parse_parser.add_argument('--value-only', action='store_true',
                              help='Print the header value without the header name')
    parse_parser.add_argument('--format', choices=['text', 'json'],
                              default='text', help='Output format')

    # Check command
    check_parser = subparsers.add_parser('check', help='Validate a policy')
    check_parser.add_argument('policy', help='Header or header value to validate')
    check_parser.add_argument('--loose', action='store_true',
                              help='Drop invalid quoted tokens instead of failing')

    # Preset command
    preset_parser = subparsers.add_parser('preset', help='Render a named preset')
    preset_parser.add_argument('name', nargs='?', help='Preset name (default: CSP_PRESET)')
    preset_parser.add_argument('--report-only', action='store_true',
                               help='Render as Content-Security-Policy-Report-Only')
    preset_parser.add_argument('--value-only', action='store_true',
                               help='Print the header value without the header name')
    preset_parser.add_argument('--list', action='store_true', help='List available presets')

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # Logs go to stderr from the first event; the level and format are
    # applied once settings are loaded
    setup_logging()
    settings = get_settings()
    setup_logging(settings.log_level, json_format=settings.log_json)

    try:
        if args.command == 'parse':
            return cmd_parse(args)
        elif args.command == 'check':
            return cmd_check(args)
        elif args.command == 'preset':
            return cmd_preset(args)
    except CspError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def _mode(args):
    return Mode.LOOSE if args.loose else get_settings().mode


def _output_mode(args):
    if args.value_only:
        return OutputMode.VALUE_ONLY
    return get_settings().output_mode


def cmd_parse(args):
    """Execute parse command"""
    policy = CspParser(_mode(args)).parse(args.policy)
    policy.output_mode = _output_mode(args)

    if args.format == 'json':
        print(json.dumps({
            'report_only': policy.report_only,
            'directives': policy.get_directives(),
        }, indent=2))
    else:
        print(policy)
    return 0


def cmd_check(args):
    """Execute check command"""
    policy = CspParser(_mode(args)).parse(args.policy)
    print(f"OK: {len(policy)} directive(s)")
    return 0


def cmd_preset(args):
    """Execute preset command"""
    if args.list:
        for name in preset_names():
            print(name)
        return 0

    policy = load_preset(args.name, report_only=args.report_only or None)
    policy.output_mode = _output_mode(args)
    print(policy)
    return 0


if __name__ == '__main__':
    sys.exit(main())
