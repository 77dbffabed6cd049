"""Builders for server -> client JSON messages."""

from __future__ import annotations

from typing import Any

from relay.config.websocket import (
    WS_KEY_TYPE,
    WS_MSG_DONE,
    WS_MSG_ECHO,
    WS_MSG_ERROR,
    WS_MSG_READY,
    WS_MSG_WELCOME,
    WS_MSG_TRANSCRIPT,
    WS_WELCOME_TEXT,
)


def build_message(msg_type: str, **fields: Any) -> dict[str, Any]:
    message: dict[str, Any] = {WS_KEY_TYPE: msg_type}
    message.update(fields)
    return message


def build_welcome() -> dict[str, Any]:
    return build_message(WS_MSG_WELCOME, msg=WS_WELCOME_TEXT)


def build_echo(text: str) -> dict[str, Any]:
    return build_message(WS_MSG_ECHO, msg=text)


def build_ready() -> dict[str, Any]:
    return build_message(WS_MSG_READY)


def build_transcript(text: str, *, is_final: bool) -> dict[str, Any]:
    return build_message(WS_MSG_TRANSCRIPT, text=text, is_final=bool(is_final))


def build_error(message: str) -> dict[str, Any]:
    return build_message(WS_MSG_ERROR, message=message)


def build_done() -> dict[str, Any]:
    return build_message(WS_MSG_DONE)


__all__ = [
    "build_done",
    "build_echo",
    "build_error",
    "build_message",
    "build_ready",
    "build_transcript",
    "build_welcome",
]
