import re
import string

from unidecode import unidecode

from genrepass.entities import ParseRangeError, RangeErrorKind, RangeSpec


_DASH_RUN_RE = re.compile(r"-+")
_RANGE_CHARS = frozenset(string.digits + "-")

# Word characters on ASCII text: with numbers kept, blocks of digits count as words.
WORD_WITH_NUMBERS_RE = re.compile(r"\w+", re.ASCII)
WORD_WITHOUT_NUMBERS_RE = re.compile(r"[^\d\W]+", re.ASCII)


def parse_range(value: str) -> RangeSpec:
    """Parse a range like ``"20-50"`` or an exact amount like ``"24"``.

    Runs of dashes collapse into one and dashes at either end are ignored,
    so ``"--20---50-"`` is read as ``"20-50"``.
    """
    normalized = _DASH_RUN_RE.sub("-", value).strip("-")

    if normalized.count("-") > 1:
        raise ParseRangeError(RangeErrorKind.MORE_THAN_TWO_SIDES, value)

    if not all(c in _RANGE_CHARS for c in normalized):
        raise ParseRangeError(RangeErrorKind.CONTAINS_NONINTEGER_OR_DASH, value)

    if not normalized:
        raise ParseRangeError(RangeErrorKind.EMPTY, value)

    if "-" in normalized:
        left, right = normalized.split("-")
        low, high = int(left), int(right)
        if high < low:
            raise ParseRangeError(RangeErrorKind.RIGHT_SIDE_SMALLER, value)
        return RangeSpec(min=low, max=high)

    return RangeSpec.exact(int(normalized))


def to_ascii(text: str) -> str:
    if text.isascii():
        return text
    return unidecode(text)


def find_words(text: str, keep_numbers: bool) -> list[str]:
    pattern = WORD_WITH_NUMBERS_RE if keep_numbers else WORD_WITHOUT_NUMBERS_RE
    return pattern.findall(text)


def capitalise_first(word: str) -> str:
    if not word or not word[0].isascii():
        return word
    return word[0].upper() + word[1:]


def capitalise_at(chars: list[str], index: int) -> None:
    c = chars[index]
    if c.isascii():
        chars[index] = c.upper()


def decapitalise_at(chars: list[str], index: int) -> None:
    c = chars[index]
    if c.isascii():
        chars[index] = c.lower()
