"""Serialised editor documents.

Descriptions and recipe steps are stored as JSON node trees rooted at
``{"root": {...}}``. Element nodes carry ``children``; text nodes carry
``text`` and a ``format`` bit field.
"""

import json
from typing import Any

from markupsafe import Markup, escape

from domain.models import PayloadShapeError


type Document = dict[str, Any]
type Node = dict[str, Any]


BOLD = 1
ITALIC = 1 << 1
STRIKETHROUGH = 1 << 2
UNDERLINE = 1 << 3
CODE = 1 << 4

FORMAT_TAGS = (
    (CODE, "code"),
    (STRIKETHROUGH, "s"),
    (UNDERLINE, "u"),
    (ITALIC, "em"),
    (BOLD, "strong"),
)

LIST_TAGS = {"bullet": "ul", "number": "ol", "check": "ul"}

SAFE_SCHEMES = ("http://", "https://", "mailto:", "/")


def document_from_text(text: str) -> Document:
    paragraphs = [
        {
            "type": "paragraph",
            "children": [{"type": "text", "text": line, "format": 0}] if line else [],
        }
        for line in text.splitlines()
    ]
    return {"root": {"type": "root", "children": paragraphs}}


def parse_document(raw: str) -> Document:
    """Strict parse, a malformed document is a defect upstream."""
    try:
        doc = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadShapeError(f"document is not JSON: {e}") from e
    if not isinstance(doc, dict) or not isinstance(doc.get("root"), dict):
        raise PayloadShapeError("document has no root node")
    return doc


def safe_parse_document(raw: str) -> Document:
    """Parse, treating anything that is not a document as plain text."""
    try:
        return parse_document(raw)
    except PayloadShapeError:
        return document_from_text(raw)


def _render_text(node: Node) -> Markup:
    html = escape(node.get("text", ""))
    fmt = node.get("format", 0)
    if not isinstance(fmt, int):
        fmt = 0
    for bit, tag in FORMAT_TAGS:
        if fmt & bit:
            html = Markup(f"<{tag}>{html}</{tag}>")
    return html


def _render_children(node: Node) -> Markup:
    return Markup("").join(_render_node(child) for child in node.get("children", []))


def _render_node(node: Node) -> Markup:
    inner = _render_children(node)
    match node.get("type"):
        case "text":
            return _render_text(node)
        case "linebreak":
            return Markup("<br/>")
        case "root":
            return inner
        case "paragraph":
            return Markup(f"<p>{inner}</p>")
        case "heading":
            tag = node.get("tag", "h2")
            if tag not in ("h1", "h2", "h3", "h4", "h5", "h6"):
                tag = "h2"
            return Markup(f"<{tag}>{inner}</{tag}>")
        case "quote":
            return Markup(f"<blockquote>{inner}</blockquote>")
        case "list":
            tag = LIST_TAGS.get(node.get("listType", "bullet"), "ul")
            return Markup(f"<{tag}>{inner}</{tag}>")
        case "listitem":
            return Markup(f"<li>{inner}</li>")
        case "link" | "autolink":
            url = str(node.get("url", "#"))
            if not url.startswith(SAFE_SCHEMES):
                url = "#"
            return Markup('<a href="{}" rel="noopener">{}</a>').format(url, inner)
        case _:
            # unknown element types still show their content
            return inner


def render_document(doc: Document) -> Markup:
    return _render_node(doc["root"])
