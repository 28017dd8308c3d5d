"""Interactive terminal client for ShopAssist.

Talks to the proxy, keeps the conversation and session directory state, and
prints assistant replies with their recommended products.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from shopassist.assistant.client import ShopAssistClient
from shopassist.assistant.conversation import ConversationController
from shopassist.assistant.directory import SessionDirectory
from shopassist.assistant.identity import IdentityContext
from shopassist.assistant.models import Message
from shopassist.assistant.render import (
    WELCOME_TEXT,
    WELCOME_TITLE,
    directory_text,
    message_text,
    render_conversation,
)
from shopassist.config import get_settings

# Setup logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s"
)
logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  /sessions            List your previous sessions
  /open <n|id>         Open a session by list number or id
  /new                 Start a new session
  /rate <n> <1-5> [why]  Rate product n of the last recommendation
  /html <path>         Export this conversation as HTML
  /help                Show this help
  /quit                Exit"""


class ChatShell:
    """Binds the conversation and directory to terminal input/output."""

    def __init__(self, conversation: ConversationController, directory: SessionDirectory):
        self.conversation = conversation
        self.directory = directory

    def print_messages(self) -> None:
        messages = self.conversation.messages
        if not messages:
            print(f"\n{WELCOME_TITLE}\n{WELCOME_TEXT}\n")
            return
        for message in messages:
            print(message_text(message))
            print()

    def last_recommendation(self) -> Optional[Message]:
        for message in reversed(self.conversation.messages):
            if message.role == "assistant" and message.products:
                return message
        return None

    def handle_command(self, line: str) -> bool:
        """Run a slash command. Returns False when the shell should exit."""
        command, _, argument = line.partition(" ")
        argument = argument.strip()

        if command in ("/quit", "/exit"):
            return False

        if command == "/help":
            print(HELP_TEXT)
        elif command == "/sessions":
            self.directory.open_overlay()
            self.directory.refresh()
            print(directory_text(self.directory.entries()))
        elif command == "/open":
            self.open_session(argument)
        elif command == "/new":
            self.directory.new_session()
            print("Started a new session.")
        elif command == "/rate":
            self.rate(argument)
        elif command == "/html":
            self.export_html(argument)
        else:
            print(f"Unknown command {command}. Type /help for commands.")
        return True

    def open_session(self, argument: str) -> None:
        if not argument:
            print("Usage: /open <n|id>")
            return

        session_id = argument
        if argument.isdigit():
            index = int(argument) - 1
            if not 0 <= index < len(self.directory.sessions):
                print(f"No session number {argument}. Run /sessions first.")
                return
            session_id = self.directory.sessions[index].id

        self.directory.select(session_id)
        self.print_messages()

    def rate(self, argument: str) -> None:
        parts = argument.split(maxsplit=2)
        if len(parts) < 2 or not parts[0].isdigit() or not parts[1].isdigit():
            print("Usage: /rate <product number> <1-5> [reason]")
            return

        message = self.last_recommendation()
        if message is None:
            print("No recommended products to rate yet.")
            return

        index = int(parts[0]) - 1
        if not 0 <= index < len(message.products):
            print(f"No product number {parts[0]} in the last recommendation.")
            return

        reason_text = parts[2] if len(parts) > 2 else None
        try:
            ok = self.conversation.rate_product(
                message.id,
                message.products[index].id,
                int(parts[1]),
                reason_text=reason_text,
            )
        except ValueError as e:
            print(f"Error: {e}")
            return
        print("Thanks for the feedback!" if ok else "Could not submit feedback.")

    def export_html(self, argument: str) -> None:
        if not argument:
            print("Usage: /html <path>")
            return
        path = Path(argument)
        path.write_text(render_conversation(self.conversation.messages), encoding="utf-8")
        print(f"Saved conversation to {path}")

    def send(self, text: str) -> None:
        reply = self.conversation.send(text)
        if reply is not None:
            print()
            print(message_text(reply))
            print()

    def run(self) -> None:
        self.print_messages()
        while True:
            try:
                line = input("You: ").strip()
            except (EOFError, KeyboardInterrupt):
                print()
                break

            if not line:
                continue
            if line.startswith("/"):
                if not self.handle_command(line):
                    break
            else:
                self.send(line)


def build_shell(proxy_url: str, state_path: str) -> ChatShell:
    """Wire the client, identity, conversation and directory together."""
    client = ShopAssistClient(proxy_url)
    identity = IdentityContext.from_path(state_path)

    conversation = ConversationController(client, identity)
    directory = SessionDirectory(client, identity, conversation)
    conversation.on_user_discovered = directory.refresh

    conversation.initialize()
    directory.sync_identity()
    return ChatShell(conversation, directory)


def main() -> None:
    """Main CLI function."""
    settings = get_settings()

    parser = argparse.ArgumentParser(
        description="Chat with the ShopAssist shopping assistant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/chat_cli.py
  python scripts/chat_cli.py --message "running shoes under 3000"
  python scripts/chat_cli.py --proxy-url http://localhost:8000/api/shop
        """
    )

    parser.add_argument(
        "--proxy-url",
        type=str,
        default=settings.PROXY_BASE_URL,
        help=f"Base URL of the proxy's shop routes (default: {settings.PROXY_BASE_URL})"
    )

    parser.add_argument(
        "--state-path",
        type=str,
        default=settings.CLIENT_STATE_PATH,
        help="File holding the persisted user id"
    )

    parser.add_argument(
        "--message",
        "-m",
        type=str,
        help="Send a single message, print the reply and exit"
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.INFO)

    shell = build_shell(args.proxy_url, args.state_path)

    try:
        if args.message:
            shell.send(args.message)
        else:
            shell.run()
    finally:
        shell.conversation.client.close()


if __name__ == "__main__":
    main()
