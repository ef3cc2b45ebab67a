"""Text cleaning and normalization utilities."""
import re


def clean_text(text: str) -> str:
    """
    Clean and normalize text while keeping paragraph structure.

    Args:
        text: Raw text to clean

    Returns:
        Cleaned text with normalized whitespace
    """
    # Normalize line breaks
    text = re.sub(r"\r\n", "\n", text)
    text = re.sub(r"\r", "\n", text)

    # Remove special control characters but keep newlines and tabs
    text = re.sub(r"[\x00-\x08\x0b-\x0c\x0e-\x1f\x7f]", "", text)

    # Collapse runs of horizontal whitespace
    text = re.sub(r"[ \t\f\v]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)

    # Remove excessive newlines (more than 2 consecutive)
    text = re.sub(r"\n{3,}", "\n\n", text)

    return text.strip()


def clean_question(text: str) -> str:
    """Strip control characters and surrounding whitespace from a question."""
    cleaned = re.sub(r"[\x00-\x08\x0B-\x0C\x0E-\x1F\x7F]", "", text)
    return cleaned.strip()
