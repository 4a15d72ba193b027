"""Text normalization helpers."""

import unicodedata


def strip_accents(text: str) -> str:
    """Remove combining accent marks ("Líquido" -> "Liquido")."""
    decomposed = unicodedata.normalize("NFD", text)
    return "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn")


def normalize_header(text: str) -> str:
    """Lowercase, strip accents and surrounding whitespace."""
    return strip_accents(text).lower().strip()


def format_size(size_bytes: int) -> str:
    """Human label for a file size, in megabytes."""
    return f"{size_bytes / 1024 / 1024:.2f} MB"
