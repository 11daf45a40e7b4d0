"""Shared keyword filtering utilities for sources."""

import unicodedata
from typing import Iterable, Optional


def normalize(text: Optional[str]) -> str:
    """Lower-case text and strip diacritics so "Café" compares equal to "cafe"."""
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def matches_keywords(text: Optional[str], keywords: Iterable[str]) -> bool:
    """
    Check if text contains any of the keywords.
    
    Args:
        text: Text of the item (title, snippet and body)
        keywords: Keywords to look for
        
    Returns:
        True if keywords is empty or any keyword is a substring of text
        (case- and accent-insensitive)
    """
    keywords = list(keywords)
    if not keywords:
        return True  # No filtering if no keywords provided
    
    normalized = normalize(text)
    return any(normalize(keyword) in normalized for keyword in keywords)
