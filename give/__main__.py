from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .config import Config
from .plugin import bootstrap


def _configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format=(
            "{\"time\":\"%(asctime)s\",\"level\":\"%(levelname)s\","
            "\"name\":\"%(name)s\",\"message\":\"%(message)s\"}"
        ),
        stream=sys.stderr,
    )


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="give", description="Read cached plugin settings")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to configuration file (defaults to $GIVE_CONFIG or config.toml)",
    )
    commands = parser.add_subparsers(dest="command", required=True)
    option = commands.add_parser("option", help="Print a single option")
    option.add_argument("name")
    option.add_argument("--default", default="false", help="JSON default value")
    commands.add_parser("settings", help="Print the filtered plugin settings")
    commands.add_parser("currencies", help="Print the registered currencies")
    commands.add_parser("gateways", help="Print the registered gateways")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    _configure_logging()
    args = _parse_args(argv)
    config = Config.from_env(args.config)
    cache = bootstrap(config)

    result: Any
    if args.command == "option":
        try:
            default = json.loads(args.default)
        except ValueError:
            default = args.default
        result = cache.get_option(args.name, default)
    elif args.command == "settings":
        result = cache.get_settings()
    else:
        result = cache.get_option(args.command, {})
    print(json.dumps(result, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
