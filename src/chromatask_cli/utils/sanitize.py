"""HTML cleanup for task titles and descriptions.

Titles are plain text: markup is removed. Descriptions keep a small
formatting subset; everything else is unwrapped or dropped.
"""

from __future__ import annotations

import re

from bs4 import BeautifulSoup, Comment

ALLOWED_TAGS = frozenset(
    {
        "a",
        "b",
        "blockquote",
        "br",
        "code",
        "div",
        "em",
        "font",
        "h1",
        "h2",
        "h3",
        "i",
        "li",
        "ol",
        "p",
        "pre",
        "s",
        "span",
        "strong",
        "u",
        "ul",
    }
)
ALLOWED_ATTRIBUTES = frozenset({"style", "color", "face", "size", "href"})
DROPPED_WITH_CONTENT = ("script", "style", "iframe", "object", "embed", "template")
SAFE_URL_SCHEMES = ("http://", "https://", "mailto:")

_LINE_BREAK_RE = re.compile(r"<br\s*/?>|</p\s*>", re.IGNORECASE)
_TABS_RE = re.compile(r"[\t\r]+")
_UNSAFE_STYLE_RE = re.compile(r"expression\s*\(|javascript:|url\s*\(", re.IGNORECASE)


def strip_html(value: str | None) -> str:
    """Reduce a possibly-marked-up title to plain text.

    ``<br>`` and ``</p>`` become newlines, every other tag is removed, tabs
    and carriage returns collapse to a single space, and entities are decoded.
    """
    if not value:
        return ""
    text = _LINE_BREAK_RE.sub("\n", value)
    text = BeautifulSoup(text, "html.parser").get_text()
    text = _TABS_RE.sub(" ", text)
    return text.strip()


def sanitize_description(value: str | None) -> str:
    """Keep only the safe formatting subset of a description fragment."""
    if not value:
        return ""

    soup = BeautifulSoup(value, "html.parser")

    for comment in soup.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()

    for tag in soup.find_all(DROPPED_WITH_CONTENT):
        if not tag.decomposed:
            tag.decompose()

    for tag in soup.find_all(True):
        if tag.name not in ALLOWED_TAGS:
            tag.unwrap()
            continue

        for attr in list(tag.attrs):
            if attr not in ALLOWED_ATTRIBUTES:
                del tag.attrs[attr]

        href = tag.attrs.get("href")
        if href is not None:
            if tag.name != "a" or not str(href).strip().lower().startswith(SAFE_URL_SCHEMES):
                del tag.attrs["href"]
            else:
                tag.attrs["rel"] = "noopener noreferrer"

        style = tag.attrs.get("style")
        if style is not None and _UNSAFE_STYLE_RE.search(str(style)):
            del tag.attrs["style"]

    return str(soup).strip()
