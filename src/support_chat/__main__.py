"""Console shell for talking to the support assistant from a terminal."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path
import sys
import webbrowser

from .config import load_config
from .content_parser import Block, BlockKind, Span
from .events import MESSAGE_APPENDED, Event
from .logging_utils import configure_logging
from .models import PageContext, Role
from .widget import RenderedMessage, SupportChatWidget

HELP_TEXT = "Commands: /end, /new, /open, /close, /action N, /quit"


class ConsoleExecutors:
    """Carry out actions from a terminal session."""

    def __init__(self, route: str = "/") -> None:
        self.route = route

    def navigate_internal(self, path: str) -> None:
        self.route = path
        print(f"[navigated to {path}]")

    def open_external(self, url: str) -> None:
        webbrowser.open_new_tab(url)

    def open_mailto(self, address: str) -> None:
        webbrowser.open(f"mailto:{address}")

    def open_tel(self, number: str) -> None:
        webbrowser.open(f"tel:{number}")

    def write_clipboard(self, text: str) -> None:
        print(f"[copy] {text}")


def _format_spans(spans: Sequence[Span], emphasis: bool) -> str:
    if not emphasis:
        return "".join(span.text for span in spans)
    return "".join(
        f"\033[1m{span.text}\033[0m" if span.bold else span.text for span in spans
    )


def format_block(block: Block, emphasis: bool = False) -> str:
    lines = [_format_spans(spans, emphasis) for spans in block.spans]
    if block.kind is BlockKind.ORDERED_LIST:
        return "\n".join(f"  {number}. {line}" for number, line in enumerate(lines, 1))
    if block.kind is BlockKind.UNORDERED_LIST:
        return "\n".join(f"  • {line}" for line in lines)
    return "\n".join(lines)


def format_message(rendered: RenderedMessage, emphasis: bool = False) -> str:
    speaker = "you" if rendered.message.role is Role.USER else "support"
    body = "\n\n".join(format_block(block, emphasis) for block in rendered.blocks)
    parts = [f"{speaker}> {body}"]
    for number, action in enumerate(rendered.actions, 1):
        parts.append(f"  [{number}] {action.label}")
    return "\n".join(parts)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="support-chat",
        description="Chat with the FoodFlow support assistant from a terminal",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a config.toml (defaults to ~/.config/foodflow-support)",
    )
    parser.add_argument(
        "--route",
        default="/",
        help="Page the questions are asked from, e.g. /donor/list?donationId=42",
    )
    return parser


async def _run_shell(widget: SupportChatWidget) -> None:
    emphasis = sys.stdout.isatty()

    def on_appended(event: Event) -> None:
        if event.data["message"].role is Role.ASSISTANT:
            print(format_message(widget.render_message(event.data["message"]), emphasis))

    widget.subscribe(MESSAGE_APPENDED, on_appended)
    print(HELP_TEXT)
    widget.open()
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            command, _, argument = line.strip().partition(" ")
            if command == "/quit":
                break
            elif command == "/end":
                widget.end_chat()
            elif command == "/new":
                widget.new_chat()
            elif command == "/open":
                widget.open()
            elif command == "/close":
                widget.close()
            elif command == "/action":
                _dispatch_numbered(widget, argument)
            else:
                await widget.send(line)
    finally:
        await widget.aclose()


def _dispatch_numbered(widget: SupportChatWidget, argument: str) -> None:
    assistant = [m for m in widget.messages if m.role is Role.ASSISTANT]
    if not assistant or not argument.isdigit():
        print(HELP_TEXT)
        return
    actions = assistant[-1].actions
    index = int(argument) - 1
    if 0 <= index < len(actions):
        widget.dispatch(actions[index])
    else:
        print(f"No action {argument} on the last reply.")


def main(argv: Sequence[str] | None = None) -> None:
    """Load configuration, set up logging, and run the chat shell."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("foodflow-support-chat")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"support-chat {version}")
        return

    config = load_config(args.config)
    configure_logging(config["logging"])

    executors = ConsoleExecutors(args.route)
    widget = SupportChatWidget.from_config(
        config,
        executors,
        lambda: PageContext.from_url(executors.route),
    )
    asyncio.run(_run_shell(widget))


if __name__ == "__main__":
    main()
