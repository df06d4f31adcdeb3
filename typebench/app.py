"""Application entry point for the typebench typing benchmark."""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import List, Optional

from typebench.core.config import DEFAULT_TIME, DEFAULT_WORD_COUNT, Difficulty, Mode, SessionConfig
from typebench.core.corpus import CorpusProvider
from typebench.core.errors import ConfigError, EmptyCorpus
from typebench.core.session import TypingSession
from typebench.ui.render import result_lines
from typebench.ui.dialogs import prompt_config
from typebench.ui.terminal import run_session

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None) -> None:
    """Configure application-wide logging with a standard format.

    The session owns the whole screen, so records go to ``log_file`` when one
    is given. Without a file only WARNING and above reach stderr.
    """
    numeric_level = getattr(logging, level.upper())
    if log_file is None:
        numeric_level = max(numeric_level, logging.WARNING)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, filename=log_file)


def package_version() -> str:
    try:
        return version("typebench")
    except PackageNotFoundError:
        return "unknown"


def create_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="typebench",
        description="A terminal typing benchmark: time, word-count and quote tests with live WPM and accuracy.",
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {package_version()}")

    session_group = parser.add_argument_group("Session (skips the interactive prompts)")
    session_group.add_argument("--mode", choices=[m.value for m in Mode], help="Game type")
    session_group.add_argument("--duration", type=int, help=f"Time limit in seconds for time mode. Default: {DEFAULT_TIME}")
    session_group.add_argument("--words", type=int, help=f"Number of words for words mode. Default: {DEFAULT_WORD_COUNT}")
    session_group.add_argument(
        "--difficulty", choices=[d.value for d in Difficulty], default=Difficulty.MEDIUM.value, help="Default: medium"
    )

    parser.add_argument(
        "--log_level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level. Default: WARNING"
    )
    parser.add_argument("--log-file", help="Write log records to this file instead of stderr")
    return parser


def config_from_args(args: argparse.Namespace) -> Optional[SessionConfig]:
    """Build a SessionConfig from CLI flags, or None when no mode was given."""
    if args.mode is None:
        return None
    mode = Mode.parse(args.mode)
    difficulty = Difficulty.parse(args.difficulty)
    if mode is Mode.TIME:
        return SessionConfig.time(args.duration if args.duration is not None else DEFAULT_TIME, difficulty)
    if mode is Mode.WORDS:
        return SessionConfig.words(args.words if args.words is not None else DEFAULT_WORD_COUNT, difficulty)
    return SessionConfig.quote(difficulty)


def main(argv: Optional[List[str]] = None) -> int:
    args = create_arg_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        config = config_from_args(args) or prompt_config()
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    if config is None:
        logger.info("Setup cancelled")
        return 0

    try:
        target = CorpusProvider().target_for(config)
    except EmptyCorpus as e:
        logger.error("No text for %s: %s", config.describe(), e)
        print(f"No text available: {e}", file=sys.stderr)
        return 1

    session = TypingSession(config, target)
    try:
        snapshot = run_session(session)
    except KeyboardInterrupt:
        session.abort()
        snapshot = session.snapshot()

    print(config.describe())
    for label, value in result_lines(snapshot):
        print(f"{label}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
