"""
Text Utilities

Helper functions for title cleanup and handle generation.
"""

import re


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    if not text:
        return ""
    return re.sub(r'\s+', ' ', text).strip()


def strip_non_alphanumeric(text: str) -> str:
    """
    Remove punctuation from a title, keeping letters, digits and spaces.

    Apostrophes are dropped outright so "Women's" stays one word;
    all other separators become spaces.

    Args:
        text: Raw title text

    Returns:
        Cleaned text with collapsed whitespace

    Example:
        >>> strip_non_alphanumeric("Women's Tee - (Heavy)")
        'Womens Tee Heavy'
    """
    if not text:
        return ""

    text = re.sub(r"['’]", '', text)
    text = re.sub(r'[\W_]+', ' ', text)
    return collapse_whitespace(text)


def make_handle(title: str) -> str:
    """
    Build a product handle by replacing whitespace runs with a dash.

    Args:
        title: Base product title

    Returns:
        Handle string

    Example:
        >>> make_handle("Classic  Tee")
        'Classic-Tee'
    """
    if not title:
        return ""
    return re.sub(r'\s+', '-', title.strip())
