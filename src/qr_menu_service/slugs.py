"""Restaurant slug normalisation."""

import re

_TURKISH_MAP = str.maketrans(
    {
        "ç": "c",
        "Ç": "C",
        "ğ": "g",
        "Ğ": "G",
        "ı": "i",
        "İ": "I",
        "ö": "o",
        "Ö": "O",
        "ş": "s",
        "Ş": "S",
        "ü": "u",
        "Ü": "U",
    }
)

MAX_SUGGESTION_SUFFIX = 50


def slugify(text: str) -> str:
    """Turn a restaurant name into a URL-safe slug.

    Turkish letters are folded to ASCII before lowercasing, so
    "Çiğköfte Dünyası" becomes "cigkofte-dunyasi".
    """
    slug = text.translate(_TURKISH_MAP).lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def suggestion_candidates(slug: str) -> list[str]:
    """Numbered variants tried when a slug is taken: slug-2 .. slug-50."""
    return [f"{slug}-{i}" for i in range(2, MAX_SUGGESTION_SUFFIX + 1)]
