"""HTML markup removal for comment text."""

import warnings

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning


def strip_html(text: str) -> str:
    """Remove HTML tags from text, keeping the text content.

    Only tags are removed. Character references such as ``&amp;`` are left
    exactly as written, so the text between tags is returned unchanged.

    Args:
        text: Any string, with or without markup.

    Returns:
        The text with all tags removed.
    """
    if not text:
        return text
    # Escaped ampersands decode back to themselves, leaving references intact
    escaped = text.replace("&", "&amp;")
    with warnings.catch_warnings():
        # Short comments such as "example.com" look like URLs to BeautifulSoup
        warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
        soup = BeautifulSoup(escaped, "html.parser")
    return soup.get_text()
