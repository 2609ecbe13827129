"""
Command-line interface for DAS.

Main entry point and the interactive directive loop.
"""

import argparse
import logging
import random
from pathlib import Path

from prompt_toolkit import prompt as pt_prompt

from .command_registry import create_completer
from .config import load_config
from .dispatcher import CommandDispatcher
from .headless import run_headless
from .renderer import THEME, console, pt_style, render_response, show_banner, show_help, show_status

logger = logging.getLogger(__name__)

QUIT_WORDS = {"QUIT", "EXIT"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="DAS - Delta Green campaign state tracker")
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Read directives from stdin, write JSON envelopes to stdout",
    )
    parser.add_argument(
        "--campaigns-dir",
        type=Path,
        default=Path("campaigns"),
        help="Directory holding .das_config.json (default: ./campaigns)",
    )
    parser.add_argument(
        "--events",
        action="store_true",
        help="Headless only: also write campaign events as JSON lines",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed dice rolls for a reproducible session",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Log at INFO and show response payloads",
    )
    return parser


def configure_logging(level_name: str, verbose: bool) -> None:
    level = logging.INFO if verbose else getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


def repl(dispatcher: CommandDispatcher, verbose: bool = False) -> None:
    """Interactive loop. STATUS! shows the roster, QUIT leaves."""
    completer = create_completer(dispatcher.registry)
    show_banner()
    console.print(f"[{THEME['dim']}]Type HELP for directives, QUIT to exit.[/{THEME['dim']}]\n")

    while True:
        try:
            user_input = pt_prompt(
                "DAS> ",
                completer=completer,
                style=pt_style,
                complete_while_typing=True,
            ).strip()

            if not user_input:
                continue

            word = user_input.split()[0].upper()
            if word in QUIT_WORDS:
                break
            if word == "HELP" and len(user_input.split()) == 1:
                show_help(dispatcher.registry)
                continue
            if word == "STATUS!":
                show_status(dispatcher)
                continue

            render_response(dispatcher.process(user_input), verbose=verbose)
            console.print()

        except KeyboardInterrupt:
            console.print(f"\n[{THEME['dim']}]Use QUIT to exit[/{THEME['dim']}]")
        except EOFError:
            break


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    config = load_config(args.campaigns_dir)
    configure_logging(config.get("log_level", "WARNING"), args.verbose)

    rng = random.Random(args.seed) if args.seed is not None else None
    dispatcher = CommandDispatcher(config=config, rng=rng)
    logger.info(f"Campaign {dispatcher.manager.campaign_id} ready")

    if args.headless:
        run_headless(dispatcher, emit_events=args.events)
    else:
        repl(dispatcher, verbose=args.verbose)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
