"""Helpers for rich-text (portable text) and localized document fields."""

from typing import Any

from ..core.enums import DEFAULT_LANGUAGE


def extract_plain_text(blocks: Any) -> str:
    """Flatten portable text blocks into plain text, one line per block.

    Standard ``block`` entries contribute the text of their children;
    custom block types contribute a top-level ``text`` field if they have
    one. Anything else is ignored.

    Examples:
        >>> extract_plain_text([{"_type": "block", "children": [{"text": "Hi"}]}])
        'Hi'
        >>> extract_plain_text(None)
        ''
    """
    if not isinstance(blocks, list):
        return ""

    lines: list[str] = []
    for block in blocks:
        if not isinstance(block, dict):
            continue
        if block.get("_type") == "block" and isinstance(block.get("children"), list):
            text = "".join(
                child.get("text", "")
                for child in block["children"]
                if isinstance(child, dict) and isinstance(child.get("text"), str)
            )
        elif isinstance(block.get("text"), str):
            text = block["text"]
        else:
            text = ""
        if text:
            lines.append(text)
    return "\n".join(lines).strip()


def resolve_localized(field: Any, lang: str = DEFAULT_LANGUAGE) -> Any:
    """Pick the value for ``lang`` from a localized field.

    Localized fields are stored as ``{"sv": ..., "en": ...}``. Falls back
    to the default language, then to an empty string. Plain values are
    returned unchanged.
    """
    if isinstance(field, dict) and "_type" not in field:
        return field.get(lang) or field.get(DEFAULT_LANGUAGE) or ""
    if field is None:
        return ""
    return field

