"""
Utility functions for the seo-writer project.
"""

import re

_CODE_FENCE = re.compile(r'^\s*```(?:json)?\s*(.*?)\s*```\s*$', re.DOTALL | re.IGNORECASE)


def normalize_dict_keys(data: dict) -> dict:
    """
    Normalize dictionary keys to snake_case for Pydantic validation.

    Only the spelling of a key changes; keys outside the response contract
    are left for validation to reject or ignore.

    Examples:
        'articleBody'          → 'article_body'
        'META_DESCRIPTION'     → 'meta_description'
        'generatedSubheadings' → 'generated_subheadings'

    Returns the input unchanged if it is not a dict.
    """
    if not isinstance(data, dict):
        return data

    normalized = {}
    for key, value in data.items():
        # "ABCDef" → "ABC_Def"
        s1 = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', str(key))
        # "camelCase" → "camel_Case"
        s2 = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', s1)
        normalized[s2.lower()] = value

    return normalized


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence some backends wrap JSON in."""
    match = _CODE_FENCE.match(text)
    return match.group(1) if match else text.strip()
