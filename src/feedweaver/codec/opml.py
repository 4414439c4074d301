"""OPML codec.

Converts OPML text to an :class:`OutlineDocument` and back. Parsing uses lxml with entity
resolution and network access disabled; serialization is deterministic (fixed attribute order,
two-space indentation) so exporting the same snapshot twice yields identical text.
"""

from __future__ import annotations

import re
from pathlib import Path
from xml.sax.saxutils import escape

from lxml import etree

from feedweaver.errors import ParseError
from feedweaver.logging import get_logger
from feedweaver.models.outline import Feed, Folder, OutlineDocument, OutlineNode

logger = get_logger(__name__)

OUTLINE_TAG = "outline"
FOLDER_TYPE = "folder"
DEFAULT_FEED_TYPE = "rss"

# Attribute names as they appear in OPML
ATTR_LABEL = "text"
ATTR_TYPE = "type"
ATTR_FEED_URL = "xmlUrl"
ATTR_SITE_URL = "htmlUrl"

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")

# The five standard entities, plus whitespace that attribute normalization would otherwise fold.
_ATTR_ENTITIES = {
    '"': "&quot;",
    "'": "&apos;",
    "\n": "&#10;",
    "\r": "&#13;",
    "\t": "&#9;",
}


def _parser() -> etree.XMLParser:
    return etree.XMLParser(
        resolve_entities=False,
        no_network=True,
        remove_comments=True,
        remove_pis=True,
        huge_tree=False,
    )


def _local_name(element: etree._Element) -> str | None:
    if not isinstance(element.tag, str):
        return None
    return etree.QName(element).localname


def _nested_outlines(element: etree._Element) -> list[etree._Element]:
    """Closest outline descendants of ``element``, in document order.

    Outlines wrapped in foreign elements still belong to the nearest enclosing outline.
    """

    found: list[etree._Element] = []
    for child in element:
        name = _local_name(child)
        if name is None:
            continue
        if name == OUTLINE_TAG:
            found.append(child)
        else:
            found.extend(_nested_outlines(child))
    return found


def _attr(element: etree._Element, name: str) -> str | None:
    # Absent attributes stay absent; an empty attribute is still a value.
    return element.get(name)


def _parse_outline(element: etree._Element) -> OutlineNode:
    nested = _nested_outlines(element)
    label = _attr(element, ATTR_LABEL)

    marker = (element.get(ATTR_TYPE) or "").strip()
    if marker:
        is_folder = marker.lower() == FOLDER_TYPE
    else:
        is_folder = bool(nested)

    if is_folder:
        children = tuple(_parse_outline(child) for child in nested) if nested else None
        return Folder(label=label, children=children)

    if nested:
        logger.warning(
            "Dropping %d nested outline(s) under feed %r (type=%r)", len(nested), label, marker
        )
    return Feed(
        label=label,
        feed_url=_attr(element, ATTR_FEED_URL),
        site_url=_attr(element, ATTR_SITE_URL),
        feed_type=marker or DEFAULT_FEED_TYPE,
    )


def parse(text: str | bytes) -> OutlineDocument:
    """Parse OPML text into a document.

    Only outline elements without an enclosing outline become roots; nested outlines become
    children recursively. A node is a folder when its ``type`` says so, or, without a type
    marker, when it has at least one nested outline.

    Args:
        text: Whole document. ``bytes`` input honours its XML encoding declaration.

    Returns:
        The parsed document.

    Raises:
        ParseError: If the text is not well-formed XML.
    """

    if isinstance(text, str):
        # lxml rejects str input that carries an encoding declaration
        data = _XML_DECLARATION.sub("", text, count=1).encode("utf-8")
    else:
        data = text

    try:
        root = etree.fromstring(data, _parser())
    except (etree.XMLSyntaxError, ValueError) as e:
        raise ParseError(f"malformed OPML: {e}") from e

    if _local_name(root) == OUTLINE_TAG:
        tops = [root]
    else:
        tops = _nested_outlines(root)

    document = OutlineDocument(nodes=tuple(_parse_outline(el) for el in tops))
    logger.debug("Parsed OPML with %d root outline(s)", len(document.nodes))
    return document


def _escape_attr(value: str) -> str:
    return escape(value, _ATTR_ENTITIES)


def _attributes(node: OutlineNode) -> list[tuple[str, str]]:
    attrs: list[tuple[str, str]] = []
    if node.label is not None:
        attrs.append((ATTR_LABEL, node.label))
    if isinstance(node, Folder):
        # Always tagged: an empty folder is otherwise indistinguishable from a feed.
        attrs.append((ATTR_TYPE, FOLDER_TYPE))
        return attrs
    attrs.append((ATTR_TYPE, node.feed_type))
    if node.feed_url is not None:
        attrs.append((ATTR_FEED_URL, node.feed_url))
    if node.site_url is not None:
        attrs.append((ATTR_SITE_URL, node.site_url))
    return attrs


def _serialize_outline(node: OutlineNode, depth: int, indent: str, out: list[str]) -> None:
    pad = indent * depth
    attrs = "".join(f' {name}="{_escape_attr(value)}"' for name, value in _attributes(node))
    children = node.children if isinstance(node, Folder) else None
    if not children:
        out.append(f"{pad}<{OUTLINE_TAG}{attrs}/>")
        return
    out.append(f"{pad}<{OUTLINE_TAG}{attrs}>")
    for child in children:
        _serialize_outline(child, depth + 1, indent, out)
    out.append(f"{pad}</{OUTLINE_TAG}>")


def serialize(
    document: OutlineDocument,
    *,
    title: str = "Exported OPML",
    version: str = "2.0",
    indent: str = "  ",
) -> str:
    """Serialize a document to OPML text.

    Args:
        document: Snapshot to export.
        title: Content of ``head/title``.
        version: Value of the ``opml/@version`` attribute.
        indent: Indentation unit.

    Returns:
        The whole OPML document, UTF-8 declared, newline-terminated.
    """

    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<opml version="{_escape_attr(version)}">',
        f"{indent}<head>",
        f"{indent * 2}<title>{escape(title)}</title>",
        f"{indent}</head>",
        f"{indent}<body>",
    ]
    for node in document.nodes:
        _serialize_outline(node, 2, indent, lines)
    lines.append(f"{indent}</body>")
    lines.append("</opml>")
    return "\n".join(lines) + "\n"


def read_opml(path: Path) -> OutlineDocument:
    """Read and parse an OPML file as a whole."""

    document = parse(path.read_bytes())
    logger.info("Loaded %d root outline(s) from %s", len(document.nodes), path)
    return document


def write_opml(path: Path, document: OutlineDocument, **options: str) -> Path:
    """Serialize ``document`` and write it to ``path`` in one piece."""

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize(document, **options), encoding="utf-8")
    logger.info("Wrote %d root outline(s) to %s", len(document.nodes), path)
    return path
