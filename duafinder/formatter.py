"""Render search results and entries as chat messages."""
from __future__ import annotations

import html
import re
from typing import List, Sequence

from .records import Record

MAX_MESSAGE_LENGTH = 4096
PREVIEW_LENGTH = 90
SEPARATOR = "━━━━━━━━━━━━━━━━━━"
_NUMBER_BADGES = ("1️⃣", "2️⃣", "3️⃣")


def _escape(value: str, enabled: bool) -> str:
    return html.escape(value, quote=True) if enabled else value


def _bold(value: str, enabled: bool) -> str:
    return f"<b>{value}</b>" if enabled else value


def _truncate_message(message: str) -> str:
    if len(message) <= MAX_MESSAGE_LENGTH:
        return message
    return f"{message[: MAX_MESSAGE_LENGTH - 3]}..."


def preview(record: Record, limit: int = PREVIEW_LENGTH) -> str:
    source = record.arabic or record.english or "No text"
    text = re.sub(r"\s+", " ", source).strip()
    if not text:
        return "No text"
    if len(text) > limit:
        return f"{text[: limit - 1]}…"
    return text


def format_options(records: Sequence[Record], *, use_html: bool = False) -> str:
    """Numbered list of up to three matches with a selection hint."""
    items: List[str] = []
    for badge, record in zip(_NUMBER_BADGES, records):
        label = _bold(f"[{_escape(record.category or 'General', use_html)}]", use_html)
        items.append(f"{badge} {label}\n{_escape(preview(record), use_html)}")
    count = min(len(records), len(_NUMBER_BADGES))
    choices = ", ".join(str(n) for n in range(1, count + 1))
    lines = [
        f"🌿 {_bold('Dua Results', use_html)}",
        SEPARATOR,
        "",
        f"🔎 {_bold('Multiple matches found', use_html)}",
        "",
        *items,
        "",
        SEPARATOR,
        f"✍️ Reply with {_bold(choices, use_html)} to view full dua",
        "",
        "❌ Send /cancel to exit",
    ]
    return _truncate_message("\n".join(lines))


def format_entry(record: Record, *, use_html: bool = False) -> str:
    def field(value: str) -> str:
        return _escape(value or "N/A", use_html)

    lines = [
        f"🌙 {_bold(_escape(record.category or 'General', use_html) + ' Dua', use_html)}",
        "",
        field(record.arabic),
        "",
        "English:",
        field(record.english),
        "",
        "Urdu:",
        field(record.urdu),
        "",
        f"📚 Source: {field(record.source)}",
        f"Authenticity: {field(record.authenticity)}",
    ]
    return _truncate_message("\n".join(lines))


def format_search_prompt() -> str:
    return "\n".join(
        [
            "🌿 Dua Search Mode",
            SEPARATOR,
            "",
            "🔎 Type any keyword to search.",
            "",
            "Examples:",
            "• sone ki dua",
            "• safar",
            "• morning",
            "• anxiety",
            "• رزق",
            "",
            "You can use: English | Urdu | Arabic",
            "",
            "❌ Send /cancel to exit",
        ]
    )


NO_RESULTS_MESSAGE = "No matching dua found. Try different keywords."
SUPPLIER_ERROR_MESSAGE = "Search failed due to a temporary error. Please try again."
INVALID_SELECTION_MESSAGE = "Please send a valid option number, or use /dua to restart."
CANCELLED_MESSAGE = "Dua search cancelled."
