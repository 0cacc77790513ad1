"""
Command line entry point: ask a single question and render the answer.

Usage:
    ask-llm "What is the capital of France?" --model fast
"""
import argparse
import asyncio
import logging
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .client import Client
from .config import Settings
from .errors import AskLLMError
from .providers.base import SINGLE_SHOT_MAX_TOKENS
from .response import Response
from .rich_llm_printer import RichPrinter, RichStreamPrinter
from .types import Model

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ask-llm", description="Ask Claude a question.")
    parser.add_argument("question", help="Question to ask")
    parser.add_argument(
        "-m", "--model",
        type=Model.parse,
        default=Model.MEDIUM,
        metavar="{" + ",".join(m.value for m in Model) + "}",
        help="Speed/cost tier, case-insensitive (default: medium)",
    )
    parser.add_argument(
        "-f", "--fast",
        action="store_true",
        help=f"Avoid streaming (caps the response at {SINGLE_SHOT_MAX_TOKENS} tokens)",
    )
    parser.add_argument("--plain", action="store_true", help="Print the raw text only")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
    )


async def run(args: argparse.Namespace, settings: Settings) -> Response:
    client = Client(settings).model(args.model)
    if args.fast:
        client = client.max_tokens(SINGLE_SHOT_MAX_TOKENS)

    if args.plain:
        response = await client.ask(args.question)
        print(response.text)
        return response
    if args.fast:
        return RichPrinter().print_response(await client.ask(args.question))
    return await RichStreamPrinter().print_stream(client.astream(args.question))


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        settings = Settings.from_env()
        asyncio.run(run(args, settings))
    except AskLLMError as exc:
        logger.debug("request failed", exc_info=True)
        Console(stderr=True).print(f"[bold red]error:[/bold red] {escape(str(exc))}", markup=True, highlight=False)
        return 1
    return 0
