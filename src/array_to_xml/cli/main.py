"""Main CLI entry point for the array-to-xml command-line tool.

Converts JSON documents to XML and inspects how keys would be turned into tag
names under a given configuration.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO

from array_to_xml import __version__
from array_to_xml.api import encode
from array_to_xml.naming import NamePolicy, is_valid_name, sanitize
from array_to_xml.shared.config import (
    ConfigError,
    EncoderConfig,
    KeyTransform,
)
from array_to_xml.shared.logging import get_logger

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self) -> None:
        self.encoder_config = EncoderConfig()
        self.verbose = False
        self.quiet = False

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        Unreadable files are reported and ignored; invalid settings raise
        ``ConfigError``.
        """
        config = cls()
        if config_path.exists():
            try:
                with config_path.open(encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                # ValueError covers malformed JSON and undecodable bytes
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)
                return config

            if isinstance(data, dict):
                config.encoder_config = EncoderConfig.from_dict(data)
            else:
                print("Warning: Config file must contain a JSON object", file=sys.stderr)

        return config


def apply_arguments(config: EncoderConfig, args: argparse.Namespace) -> EncoderConfig:
    """Overlay command-line options on an encoder configuration."""
    overrides: Dict[str, Any] = {}

    if args.root_name is not None:
        overrides["custom_root_name"] = args.root_name
    if args.node_name is not None:
        overrides["custom_node_name"] = args.node_name
    if args.separator is not None:
        overrides["separator"] = args.separator
    if args.transform_keys is not None:
        overrides["transform_keys"] = KeyTransform(args.transform_keys)
    if args.numeric_suffix is not None:
        overrides["numeric_node_suffix"] = args.numeric_suffix
    if getattr(args, "pretty", False):
        overrides["format_output"] = True
    if getattr(args, "xml_version", None) is not None:
        overrides["version"] = args.xml_version
    if getattr(args, "encoding", None) is not None:
        overrides["encoding"] = args.encoding
    if getattr(args, "max_depth", None) is not None:
        overrides["max_depth"] = args.max_depth

    return config.override(**overrides) if overrides else config


def load_config(args: argparse.Namespace) -> EncoderConfig:
    """Build the encoder configuration from ``--config`` and options."""
    config = CLIConfig()
    if args.config:
        config = CLIConfig.from_file(args.config)
    return apply_arguments(config.encoder_config, args)


def read_json(source: Optional[Path], stdin: Optional[TextIO] = None) -> Any:
    """Read a JSON document from a file or standard input.

    Raises:
        OSError: If the file cannot be opened
        ValueError: If the input is not UTF-8 or not valid JSON
    """
    if source is None or str(source) == "-":
        return json.load(stdin or sys.stdin)
    with source.open(encoding="utf-8") as f:
        return json.load(f)


def cmd_convert(args: argparse.Namespace) -> int:
    """Handle convert command."""
    logger = get_logger(__name__)

    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        data = read_json(args.input)
    except (OSError, ValueError) as e:
        print(f"Could not read input: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    result = encode(data, config)
    for diagnostic in result.diagnostics:
        logger.info(diagnostic.message, extra={"path": diagnostic.path})

    if args.output:
        try:
            args.output.write_text(
                result.xml, encoding=config.codec_name,
                errors="xmlcharrefreplace"
            )
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return EXIT_INPUT_ERROR
        if not args.quiet:
            print(f"XML written to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result.xml)

    return EXIT_OK if result.success else EXIT_INPUT_ERROR


def cmd_names(args: argparse.Namespace) -> int:
    """Handle names command: show how keys become tag names."""
    try:
        config = load_config(args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    policy = NamePolicy(config)
    results = []
    for key in args.keys:
        resolved = policy.resolve(key)
        results.append({
            "key": key,
            "valid": is_valid_name(key),
            "sanitized": sanitize(key, config.separator) if key else "",
            "tag": resolved.name,
            "strategy": resolved.strategy.value,
        })

    print(format_name_results(results, args.format))
    return EXIT_OK


def format_name_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format name inspection results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2, ensure_ascii=False)

    if not results:
        return "No keys to display."

    lines = []
    for result in results:
        status = "✓" if result["valid"] else "✗"
        lines.append(
            f"{status} {result['key']!r} -> <{result['tag']}> ({result['strategy']})"
        )
    return "\n".join(lines)


def _add_naming_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON file with encoder settings"
    )
    parser.add_argument("--root-name", help="Custom root element name")
    parser.add_argument(
        "--node-name",
        help="Element name for numeric and empty keys (default: node)"
    )
    parser.add_argument(
        "--separator",
        help="Replacement for characters not allowed in tag names (default: _)"
    )
    parser.add_argument(
        "--transform-keys",
        choices=[mode.value for mode in KeyTransform],
        help="Case folding applied to tag names"
    )
    parser.add_argument(
        "--numeric-suffix",
        metavar="SUFFIX",
        help="Append SUFFIX and the key to names of numeric keys (may be empty)"
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="array-to-xml",
        description="Convert nested JSON data to well-formed XML"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Convert command
    convert_parser = subparsers.add_parser("convert", help="Convert JSON to XML")
    convert_parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="JSON file to convert (default: stdin)"
    )
    convert_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    convert_parser.add_argument(
        "--pretty", "-p",
        action="store_true",
        help="Indent the XML output"
    )
    convert_parser.add_argument(
        "--xml-version",
        help="Version written to the XML declaration (default: 1.0)"
    )
    convert_parser.add_argument(
        "--encoding",
        help="Encoding written to the XML declaration and output file (default: UTF-8)"
    )
    convert_parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum nesting depth to encode"
    )
    _add_naming_options(convert_parser)

    # Names command
    names_parser = subparsers.add_parser(
        "names", help="Show the tag names generated for keys"
    )
    names_parser.add_argument("keys", nargs="+", help="Keys to inspect")
    names_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format"
    )
    _add_naming_options(names_parser)

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return EXIT_INPUT_ERROR

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "convert":
            return cmd_convert(args)
        if args.command == "names":
            return cmd_names(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
