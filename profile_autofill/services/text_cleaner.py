"""Clean label and context fragments captured by the page scanner."""

import html
import re


def clean_fragment(html_text: str, max_chars: int = 500) -> str:
    """
    Clean a label or surrounding-text fragment into a single line of plain text.
    Removes scripts, styles, tags and entities, collapses whitespace, and truncates if needed.
    """
    if not html_text or not html_text.strip():
        return ""

    text = html_text

    # Remove script and style blocks (content between tags)
    text = re.sub(r"<script[^>]*>[\s\S]*?</script>", " ", text, flags=re.IGNORECASE)
    text = re.sub(r"<style[^>]*>[\s\S]*?</style>", " ", text, flags=re.IGNORECASE)

    # Strip all remaining HTML tags
    text = re.sub(r"<[^>]+>", " ", text)

    # Decode entities (&nbsp;, &amp;, numeric references)
    text = html.unescape(text).replace("\xa0", " ")

    # Required-field markers carry no meaning for classification
    text = re.sub(r"\s*\*+\s*", " ", text)

    text = re.sub(r"\s+", " ", text).strip()

    if len(text) > max_chars:
        text = text[:max_chars].rsplit(" ", 1)[0]

    return text


def normalize_label(text: str) -> str:
    """Lower-case words only: "E-mail Address *" -> "e mail address"."""
    if not text:
        return ""
    text = re.sub(r"[^a-z0-9]+", " ", text.lower())
    return text.strip()
