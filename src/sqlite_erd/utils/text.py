"""
Text helpers for emitting identifiers into ASCII-only grammars
"""
import re
import unicodedata

# Letters that have no decomposition to an ASCII base letter
_TRANSLITERATIONS = {
    'ß': 'ss', 'ẞ': 'SS',
    'æ': 'ae', 'Æ': 'AE',
    'ø': 'o', 'Ø': 'O',
    'œ': 'oe', 'Œ': 'OE',
    'ł': 'l', 'Ł': 'L',
    'đ': 'd', 'Đ': 'D',
    'þ': 'th', 'Þ': 'Th',
    'ð': 'd', 'Ð': 'D',
    'ı': 'i',
}

_PLAIN_WORD = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def transliterate(text: str) -> str:
    """
    Replace non-ASCII characters with their closest ASCII equivalent

    Accented letters lose their marks (``é`` -> ``e``), a fixed set of
    standalone letters is spelled out (``ß`` -> ``ss``) and anything else
    outside ASCII becomes ``_``.
    """
    if text.isascii():
        return text

    result = []
    for char in text:
        if char.isascii():
            result.append(char)
            continue
        if char in _TRANSLITERATIONS:
            result.append(_TRANSLITERATIONS[char])
            continue
        decomposed = unicodedata.normalize('NFKD', char)
        base = ''.join(c for c in decomposed if not unicodedata.combining(c))
        if base and base.isascii():
            result.append(base)
        else:
            result.append('_')
    return ''.join(result)


def is_plain_word(text: str) -> bool:
    return bool(_PLAIN_WORD.match(text))


def indent(text: str, level: int) -> str:
    """Indent every line of text by ``level`` spaces"""
    return "\n".join(" " * level + line for line in text.split("\n"))
