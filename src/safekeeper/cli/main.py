#!/usr/bin/env python3

import argparse
import os
import sys

import argcomplete

from ..lib.core.config import get_output_mode
from ..lib.core.version import format_version_string, get_version_info
from ..lib.errors import SafekeeperError
from ..lib.substitution import SubstitutionConfig, Substituter
from ..lib.util.ansi import red, supports_color


def _complete_env_keys(prefix: str, parsed_args, **kwargs):  # pragma: no cover - shell integration
    """Complete the last name of a comma-separated ``--keys`` value from the environment."""
    head, sep, last = prefix.rpartition(",")
    done = f"{head}{sep}"
    return [f"{done}{name}" for name in sorted(os.environ) if name.startswith(last)]


def build_parser(version_string: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="safekeeper",
        description=(
            "Generate a source file from its <path>.safekeeper template, replacing "
            "ENV_<KEY> tokens with the value of environment variable KEY"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  API_TOKEN=s3cr3t safekeeper --keys=API_TOKEN config.go\n"
            "  safekeeper --keys=A,B --output=gen/keys.go keys.go\n"
            "\n"
            "In a Go source file:\n"
            "  //go:generate safekeeper --keys=API_TOKEN $GOFILE\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"safekeeper {version_string}")
    keys_arg = parser.add_argument(
        "--keys",
        required=True,
        help="Comma-delimited list of keys to be replaced by their respective "
        "environment variable value",
    )
    keys_arg.completer = _complete_env_keys  # type: ignore[attr-defined]
    parser.add_argument("--output", help="Output file name (default: the input path)")
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="path",
        help="File to generate; its template is read from <path>.safekeeper",
    )
    return parser


def main() -> None:
    # Get version info for --version flag
    version, revision = get_version_info()
    parser = build_parser(format_version_string(version, revision))
    argcomplete.autocomplete(parser)
    args = parser.parse_args()

    config = SubstitutionConfig.from_flags(args.keys, args.output, output_mode=get_output_mode())
    try:
        Substituter(config).run(args.paths)
    except SafekeeperError as e:
        print(f"{red('error', supports_color(sys.stderr))}: {e}", file=sys.stderr)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
