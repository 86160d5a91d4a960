#!/usr/bin/env python3
"""
step2code: compile exploit call sequences into Foundry tests

Main entry point for the CLI interface.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.logging import RichHandler

from cli.main import Step2CodeCLI


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="step2code: compile exploit call sequences into Foundry tests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  step2code compile sequence.json
  step2code compile sequence.json -o test/Exploit.t.sol --funds "10 ether"
  step2code config --set solidity_version 0.8.20
        """
    )

    # Global options
    parser.add_argument('--config-file', help='Path to config.yaml (default: ~/.step2code/config.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose output')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Compile command
    compile_parser = subparsers.add_parser('compile', help='Generate a Foundry test from a sequence JSON file')
    compile_parser.add_argument('sequence', help='Path to the sequence JSON file')
    compile_parser.add_argument('--output', '-o', help='Output file or directory (default: print to stdout)')
    compile_parser.add_argument('--save', action='store_true', help='Write to <output_dir>/<name>.t.sol from config')
    compile_parser.add_argument('--solidity-version', help='Override pragma version')
    compile_parser.add_argument('--contract-name', help='Override test contract name')
    compile_parser.add_argument('--funds', help='ETH dealt to every caller in setUp (e.g. "10 ether")')

    # Config command
    config_parser = subparsers.add_parser('config', help='Manage configuration settings')
    config_parser.add_argument('--show', action='store_true', help='Show current configuration')
    config_parser.add_argument('--set', nargs=2, action='append', metavar=('KEY', 'VALUE'), help='Update a setting')

    # Version command
    subparsers.add_parser('version', help='Show version information')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for step2code CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)
    cli = Step2CodeCLI(args.config_file)

    try:
        if args.command == 'compile':
            output = args.output
            if output is None and args.save:
                output = str(cli.default_output_path(args.sequence))
            return cli.run_compile(
                args.sequence,
                output=output,
                solidity_version=args.solidity_version,
                contract_name=args.contract_name,
                funds=args.funds,
            )
        elif args.command == 'config':
            rc = cli.run_config(show=args.show, set_pairs=args.set)
            if rc != 0 and not args.set:
                print("Nothing to do: use --show or --set KEY VALUE")
            return rc
        elif args.command == 'version':
            cli.show_version()
            return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 1
    except OSError as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
