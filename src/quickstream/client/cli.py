"""Command-line client: ``quickstream-client "your question"``."""

import argparse
import asyncio
import logging
import sys

from quickstream.client.buffer import format_elapsed
from quickstream.client.client import StreamClient
from quickstream.client.subscription import SubscriptionState
from quickstream.core.config import get_settings
from quickstream.core.logging_config import configure_logging


class TerminalRenderer:
    """Re-renders the display text, writing only what changed when it can."""

    def __init__(self, out=None) -> None:
        self._out = out if out is not None else sys.stdout
        self._shown = ""

    def __call__(self, display: str) -> None:
        if display.startswith(self._shown):
            self._out.write(display[len(self._shown):])
        else:
            self._out.write("\n" + display)
        self._out.flush()
        self._shown = display


def _build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="quickstream-client",
        description="Ask a quickstream server and show the answer as it arrives.",
    )
    parser.add_argument("query", nargs="+", help="text sent to the producer")
    parser.add_argument(
        "--url",
        default=f"http://127.0.0.1:{settings.port}",
        help="server base URL (default: %(default)s)",
    )
    parser.add_argument(
        "--normal",
        action="store_true",
        help="use the single-shot endpoint instead of the stream",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log client events")
    return parser


async def _stream(client: StreamClient, query: str) -> int:
    renderer = TerminalRenderer()
    first_fragment: list[float] = []
    subscription = client.subscribe(
        query, on_render=renderer, on_first_fragment=first_fragment.append
    )
    try:
        state = await subscription.run()
    finally:
        await client.close(subscription)
    print()
    if first_fragment:
        print(format_elapsed(first_fragment[0]))
    if state is SubscriptionState.CLOSED_ERROR:
        print(f"error: {subscription.error}", file=sys.stderr)
        return 1
    return 0


async def _normal(client: StreamClient, query: str) -> int:
    result = await client.fetch(query)
    print(result.text)
    print(format_elapsed(result.elapsed_ms))
    return 0 if result.ok else 1


async def _main(args: argparse.Namespace) -> int:
    query = " ".join(args.query)
    async with StreamClient(base_url=args.url) as client:
        if args.normal:
            return await _normal(client, query)
        return await _stream(client, query)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logging(logging.INFO if args.verbose else logging.WARNING)
    return asyncio.run(_main(args))


if __name__ == "__main__":
    sys.exit(main())
