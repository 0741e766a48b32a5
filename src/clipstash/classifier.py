import re

from clipstash.models import ItemType

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"\+?[1-9]?[0-9]{7,15}")
NON_PHONE_CHARS_RE = re.compile(r"[^0-9+]")

URL_PREFIXES = ("http://", "https://", "www.")
CODE_TOKENS = ("{", "}", "(", ")", "[", "]", "func ", "def ", "class ", "import ", "#include", "var ", "let ", "const ")


def classify(text: str) -> ItemType:
    """Map clipboard text to a semantic type. First matching rule wins."""
    trimmed = text.strip()

    if trimmed.startswith(URL_PREFIXES):
        return ItemType.URL

    if "@" in trimmed and "." in trimmed and not any(c.isspace() for c in trimmed):
        if EMAIL_RE.fullmatch(trimmed):
            return ItemType.EMAIL

    if _looks_like_phone(trimmed):
        return ItemType.PHONE

    if any(token in trimmed for token in CODE_TOKENS):
        return ItemType.CODE

    return ItemType.TEXT


def _looks_like_phone(trimmed: str) -> bool:
    stripped = NON_PHONE_CHARS_RE.sub("", trimmed)
    # Only a leading "+" survives; any later one disqualifies the match
    return PHONE_RE.fullmatch(stripped) is not None
