"""Slug normalization for catalog labels and URL path segments.

This module is the single source of truth for slugs. Canonical URL
generation and matching of incoming path segments both go through
``normalize`` so the two sides can never drift apart.
"""

import re

# Characters the catalog editors use as range separators
_SEPARATORS = re.compile(r"[→–/]")
_PERIODS = re.compile(r"\.")
_DISALLOWED = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def normalize(text: str) -> str:
    """Map a free-text label or path segment to its canonical slug.

    Args:
        text: Brand/model name, year range, engine label or URL segment.

    Returns:
        Lowercase slug of ASCII letters, digits, underscores and single
        hyphens; other letters (such as "ë") are dropped, not transliterated.
        Empty input yields an empty slug.

    Examples:
        >>> normalize("BMW M3!!")
        'bmw-m3'
        >>> normalize("2012→2016")
        '2012-2016'
        >>> normalize("2.0 TDI / 150hk")
        '20-tdi-150hk'
    """
    if not text:
        return ""
    slug = text.lower()
    slug = _SEPARATORS.sub("-", slug)
    slug = _PERIODS.sub("", slug)
    slug = _DISALLOWED.sub("", slug)
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def vehicle_path(
    brand: str,
    model: str | None = None,
    year: str | None = None,
    engine: str | None = None,
) -> str:
    """Build the canonical URL path for a catalog node.

    Segments are expected to be the already-chosen identifiers for each
    level (stored slug or display label); each is normalized here.

    Examples:
        >>> vehicle_path("BMW", "M3", "2012→2016", "S65 V8")
        '/bmw/m3/2012-2016/s65-v8'
    """
    segments = [brand, model, year, engine]
    return "/" + "/".join(normalize(s) for s in segments if s is not None)


def stage_anchor(stage_name: str) -> str:
    """Fragment id used to link directly to a stage on an engine page."""
    return normalize(stage_name)
