"""Rule-based word tokenizer.

Splits on character class changes: a token is a maximal run of letters, a
maximal run of decimal digits, or a maximal run of one repeated other
character ("..." stays one token, "?!" becomes two). Whitespace only
separates. Numeric characters that are not decimal digits ("²", "½", "Ⅻ")
count as other characters.
"""

from itertools import groupby

_WHITESPACE = "whitespace"
_LETTER = "letter"
_DIGIT = "digit"
_OTHER = "other"


def _char_key(char: str) -> tuple[str, str | None]:
    if char.isspace():
        return _WHITESPACE, None
    if char.isalpha():
        return _LETTER, None
    if char.isdecimal():
        return _DIGIT, None
    # Other characters only group with themselves
    return _OTHER, char


def simple_tokenize(text: str) -> list[str]:
    """Tokenize text into word-level tokens.

    Args:
        text: Text to tokenize (usually a single sentence)

    Returns:
        Tokens in order of appearance
    """
    return [
        "".join(chars)
        for (kind, _), chars in groupby(text, key=_char_key)
        if kind != _WHITESPACE
    ]
