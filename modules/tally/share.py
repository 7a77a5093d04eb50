"""Links for handing the summary text to messaging apps."""

from __future__ import annotations

from urllib.parse import quote

WHATSAPP_BASE = "https://wa.me/"


def percent_encode(text: str) -> str:
    """Encode like JavaScript's ``encodeURIComponent``."""
    return quote(text, safe="-_.!~*'()")


def whatsapp_url(text: str) -> str:
    return f"{WHATSAPP_BASE}?text={percent_encode(text)}"


__all__ = ["percent_encode", "whatsapp_url"]
