"""
Slug generation for event names.
"""

# Icelandic letters and spaces; everything else passes through unchanged.
TRANSLITERATION = {
    " ": "-",
    "ð": "d",
    "þ": "th",
    "ö": "o",
    "á": "a",
    "é": "e",
    "í": "i",
    "ó": "o",
    "ú": "u",
    "ý": "y",
    "æ": "ae",
}


def get_slug(name: str) -> str:
    """
    Turn an event name into a lowercase, URL-friendly slug.

    Each character is lowercased and substituted on its own, so every
    space becomes a hyphen. Slugs are not unique: "Café Öl" and
    "cafe ol" both give "cafe-ol".

    >>> get_slug("Café Öl")
    'cafe-ol'
    """
    parts = []
    for ch in name:
        lowered = ch.lower()
        parts.append(TRANSLITERATION.get(lowered, lowered))
    return "".join(parts)
