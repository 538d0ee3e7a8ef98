"""Console reporting — tagged status lines for the interactive session."""

import os
import sys

TAG = "[tg-config]"
DEBUG_ENV_VAR = "TG_CONFIG_DEBUG"


def info(message: str) -> None:
    print(f"{TAG} {message}")


def success(message: str) -> None:
    print(f"{TAG} ✔ {message}")


def warn(message: str) -> None:
    print(f"{TAG} Warning: {message}", file=sys.stderr)


def error(message: str) -> None:
    print(f"{TAG} Error: {message}", file=sys.stderr)


def debug(message: str) -> None:
    """Print only when TG_CONFIG_DEBUG is set to a non-empty value."""
    if os.environ.get(DEBUG_ENV_VAR):
        print(f"{TAG} [debug] {message}", file=sys.stderr)


def banner(title: str) -> None:
    print()
    print(f"=== {title} ===")
    print()
