"""Structured output for CLI and JSON modes."""

# ruff: noqa: T201
# This module is the output layer; print() is its only way of producing CLI output.

import json
import sys
from typing import NoReturn

import typer

from ts_clientquery.types import NotifyTextMessage, WhoAmI


class Output:
    """Handles all CLI output in JSON or human-readable format."""

    def __init__(self, *, json_mode: bool) -> None:
        """Initialize output handler.

        Args:
            json_mode: If True, output JSON envelopes; otherwise human-readable text.

        """
        self._json_mode = json_mode

    def _success(self, data: dict[str, object], message: str) -> None:
        """Print a success result in JSON or human-readable format."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": data}))
        else:
            print(message)

    def print_error_and_exit(self, code: str, message: str) -> NoReturn:
        """Print an error in JSON or human-readable format and exit with code 1.

        Raises:
            typer.Exit: Always, with code 1.

        """
        if self._json_mode:
            print(json.dumps({"ok": False, "error": code, "message": message}))
        else:
            print(f"Error: {message}", file=sys.stderr)
        raise typer.Exit(code=1)

    # --- Session ---

    def print_alive(self, *, alive: bool) -> None:
        """Print keep-alive result."""
        self._success({"alive": alive}, "Session alive." if alive else "Session not responding.")

    def print_whoami(self, who: WhoAmI) -> None:
        """Print own client and channel id."""
        self._success({"clid": who.client_id, "cid": who.channel_id}, f"Client {who.client_id} in channel {who.channel_id}.")

    def print_server_tab(self, schandler_id: int) -> None:
        """Print current server tab handler id."""
        self._success({"schandlerid": schandler_id}, f"Current server tab: {schandler_id}.")

    # --- Messages ---

    def print_message_sent(self, target: str) -> None:
        """Print message delivery confirmation."""
        self._success({"target": target}, f"Message sent to {target}.")

    def print_notification(self, message: NotifyTextMessage) -> None:
        """Print one received text message, one line per message."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": message.model_dump(by_alias=True)}), flush=True)
        else:
            print(f"[{message.invoker_name or message.invoker_id}] {message.msg}", flush=True)

    def print_event(self, event: str, record: str) -> None:
        """Print one raw notification record, one line per event."""
        if self._json_mode:
            print(json.dumps({"ok": True, "data": {"event": event, "record": record}}), flush=True)
        else:
            print(f"{event} {record}", flush=True)
