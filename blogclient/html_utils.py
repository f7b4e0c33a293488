from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup

_ENTITIES = (
    ("&", "&amp;"),
    ("<", "&lt;"),
    (">", "&gt;"),
    ('"', "&quot;"),
    ("'", "&#039;"),
)


def escape_html(value: Any) -> str:
    # "&" must be replaced first so the other entities are not double-escaped
    out = str(value)
    for char, entity in _ENTITIES:
        out = out.replace(char, entity)
    return out


def html_to_text(markup: str) -> str:
    """Flatten rendered markup into terminal-friendly lines."""
    soup = BeautifulSoup(markup, "lxml")
    text_all = soup.get_text("\n", strip=True)
    return "\n".join(ln.strip() for ln in text_all.splitlines() if ln.strip())
