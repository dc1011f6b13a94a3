"""Renderer implementations for outbound message formats."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import asdict

from justin.messages import OutboundMessage


def _format_value(value: object) -> str:
    if isinstance(value, list):
        return " ".join(_format_value(item) for item in value)
    return str(value)


class MessageRenderer(ABC):
    """Abstract outbound message renderer."""

    @abstractmethod
    def render_message(self, message: OutboundMessage) -> str:
        """Render a single message as one line, without the newline."""

    def render(self, messages: Iterable[OutboundMessage]) -> str:
        """Render messages one per line."""
        return "".join(f"{self.render_message(message)}\n" for message in messages)


class TextMessageRenderer(MessageRenderer):
    """
    Max outlet style: `<kind> <arg> <arg> ...`.

    List payloads are flattened into space-separated values, so
    ``OffsetOctave`` becomes ``offsetOctave`` followed by twelve numbers.
    """

    def render_message(self, message: OutboundMessage) -> str:
        parts = [message.kind]
        parts.extend(_format_value(value) for value in asdict(message).values())
        return " ".join(part for part in parts if part)


class JsonMessageRenderer(MessageRenderer):
    """One compact JSON object per line with the kind under ``"type"``."""

    def render_message(self, message: OutboundMessage) -> str:
        payload = {"type": message.kind, **asdict(message)}
        return json.dumps(payload, separators=(",", ":"))


RENDERERS: dict[str, type[MessageRenderer]] = {
    "text": TextMessageRenderer,
    "json": JsonMessageRenderer,
}


def get_renderer(output_format: str) -> MessageRenderer:
    """
    Return a renderer for "text" or "json".

    Raises:
        ValueError: For any other format name.
    """
    normalized = output_format.strip().lower()
    if normalized not in RENDERERS:
        supported = ", ".join(sorted(RENDERERS))
        raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
    return RENDERERS[normalized]()
