"""
Heading Matching Module.
Resolves generated images to the rendered headings they were generated for.
"""

import re
import logging
from typing import Dict, Optional

from ..main_schemas import CONCLUSION_HEADINGS

logger = logging.getLogger(__name__)

CONCLUSION_MARKERS = tuple(h.lower() for h in CONCLUSION_HEADINGS.values())


def normalize_text(text: str) -> str:
    """Normalize heading text for comparison (markdown marks, case, extra spaces)."""
    text = re.sub(r'^#+\s*', '', text.strip())
    text = re.sub(r'[*_`]', '', text)
    text = re.sub(r'\s+', ' ', text)
    return text.strip().lower()


def is_conclusion_heading(text: str) -> bool:
    """True for a heading naming the conclusion section in either supported language."""
    lowered = text.lower()
    return any(marker in lowered for marker in CONCLUSION_MARKERS)


def find_heading_key(heading: str, images: Dict[str, str], allow_partial: bool = False) -> Optional[str]:
    """
    Find the key of the image generated for a rendered heading.

    Matching strategies, in order:
    1. Exact key match
    2. Key match after normalization (markdown marks, whitespace, case)
    3. Substring match in either direction, only with ``allow_partial``;
       the first key in map order wins

    Args:
        heading: Text of the rendered heading
        images: Mapping of subheading text to image data URI
        allow_partial: Enable the substring fallback

    Returns:
        The matching key of ``images`` or None
    """
    if not images or not heading:
        return None

    if heading in images:
        return heading

    target = normalize_text(heading)
    if not target:
        return None

    for key in images:
        if normalize_text(key) == target:
            logger.debug(f"✅ Normalized match: '{heading}' -> '{key}'")
            return key

    if not allow_partial:
        return None

    for key in images:
        candidate = normalize_text(key)
        if candidate and (candidate in target or target in candidate):
            logger.debug(f"🔗 Partial match: '{heading}' -> '{key}'")
            return key

    return None


def find_heading_image(heading: str, images: Dict[str, str], allow_partial: bool = False) -> Optional[str]:
    """The image data URI for a rendered heading, or None. See :func:`find_heading_key`."""
    key = find_heading_key(heading, images, allow_partial)
    return images[key] if key is not None else None
