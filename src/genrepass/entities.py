from enum import StrEnum
import random
import string
from typing import Callable
import unicodedata

from pydantic import BaseModel, ConfigDict, model_validator


class GenrepassError(Exception):
    "Base class for every error raised by genrepass."


class RangeErrorKind(StrEnum):
    EMPTY = "empty"
    MORE_THAN_TWO_SIDES = "more_than_two_sides"
    CONTAINS_NONINTEGER_OR_DASH = "contains_noninteger_or_dash"
    RIGHT_SIDE_SMALLER = "right_side_smaller"


_RANGE_ERROR_MESSAGES: dict[RangeErrorKind, str] = {
    RangeErrorKind.EMPTY: "no numbers given",
    RangeErrorKind.MORE_THAN_TWO_SIDES: "more than two sides",
    RangeErrorKind.CONTAINS_NONINTEGER_OR_DASH: (
        "contains something other than integers and a - (dash)"
    ),
    RangeErrorKind.RIGHT_SIDE_SMALLER: (
        "right side of range can't be smaller than left side"
    ),
}


class ParseRangeError(GenrepassError):
    """Raised when a range string like ``"20-50"`` can't be parsed."""

    def __init__(
        self, kind: RangeErrorKind, value: str, field: str | None = None
    ) -> None:
        self.kind = kind
        self.value = value
        self.field = field
        where = f" for {field}" if field else ""
        super().__init__(
            f"invalid range {value!r}{where}: {_RANGE_ERROR_MESSAGES[kind]}"
        )


class NonAsciiSpecialCharsError(GenrepassError):
    def __init__(self, chars: str) -> None:
        self.chars = chars
        offending = "".join(sorted({c for c in chars if not c.isascii()}))
        super().__init__(
            "non-ASCII special characters aren't allowed for insertables: "
            f"{offending!r}"
        )


class NotEnoughWordsError(GenrepassError):
    def __init__(self, word_count: int) -> None:
        self.word_count = word_count
        super().__init__(
            "not enough words for password generation: "
            f"need at least 2, have {word_count}"
        )


class WordIndexError(GenrepassError, IndexError):
    def __init__(self, index: int, length: int) -> None:
        self.index = index
        self.length = length
        super().__init__(f"word index {index} out of range for {length} words")


class RangeSpec(BaseModel):
    """Inclusive integer range used for every amount setting."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int

    @model_validator(mode="after")
    def _check_bounds(self) -> "RangeSpec":
        if self.min < 0:
            raise ValueError("range bounds must be non-negative")
        if self.max < self.min:
            raise ValueError("max must be greater than or equal to min")
        return self

    @classmethod
    def exact(cls, value: int) -> "RangeSpec":
        return cls(min=value, max=value)

    @property
    def width(self) -> int:
        return self.max - self.min

    def sample(self, rng: random.Random) -> int:
        return rng.randint(self.min, self.max)

    def __str__(self) -> str:
        if self.min == self.max:
            return str(self.min)
        return f"{self.min}-{self.max}"


class Split(StrEnum):
    """The way to split text into words"""

    # UAX#29 word-bounded segments containing a letter or a number
    UNICODE_WORDS = "unicode_words"
    # every UAX#29 segment, so joining the words gives back the text
    WORD_BOUNDS = "word_bounds"
    UNICODE_WHITESPACE = "unicode_whitespace"
    ASCII_WHITESPACE = "ascii_whitespace"
    CHAR_DELIMITED = "char_delimited"


class Transliterate(StrEnum):
    """When to turn non-ASCII text into ASCII during extraction"""

    OFF = "off"
    BEFORE_SPLIT = "before_split"
    BEFORE_FILTER = "before_filter"
    AFTER_FILTER = "after_filter"


ASCII_WHITESPACE = " \t\n\x0c\r"
# Characters with the Unicode White_Space property
UNICODE_WHITESPACE = (
    "\t\n\x0b\x0c\r \x85\xa0\u1680\u2000\u2001\u2002\u2003\u2004\u2005"
    "\u2006\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000"
)
_ASCII_PUNCTUATION = frozenset(string.punctuation)
_ASCII_DIGITS = frozenset(string.digits)


def _is_ascii_char(c: str) -> bool:
    return ord(c) < 128


def _is_ascii_control(c: str) -> bool:
    return ord(c) < 32 or ord(c) == 127


def _is_control(c: str) -> bool:
    return unicodedata.category(c) == "Cc"


def _is_numeric(c: str) -> bool:
    return unicodedata.category(c) in ("Nd", "Nl", "No")


def _ascii_base(c: str) -> bool:
    return _is_ascii_char(c) and c not in ASCII_WHITESPACE and not _is_ascii_control(c)


def _unicode_base(c: str) -> bool:
    return not c.isspace() and not _is_control(c)


class CharFilter(StrEnum):
    """Stock character filters for ``Lexicon.extract_words``.

    Every filter drops whitespace and control characters; the name says
    what else gets dropped.
    """

    ASCII = "ascii"
    ASCII_WITHOUT_PUNCTUATION = "ascii_without_punctuation"
    ASCII_WITHOUT_DIGITS = "ascii_without_digits"
    ASCII_WITHOUT_DIGITS_OR_PUNCTUATION = "ascii_without_digits_or_punctuation"
    UNICODE = "unicode"
    UNICODE_WITHOUT_ASCII_DIGITS = "unicode_without_ascii_digits"
    UNICODE_WITHOUT_NUMBERS = "unicode_without_numbers"
    UNICODE_WITHOUT_ASCII_PUNCTUATION = "unicode_without_ascii_punctuation"
    UNICODE_WITHOUT_ASCII_DIGITS_OR_ASCII_PUNCTUATION = (
        "unicode_without_ascii_digits_or_ascii_punctuation"
    )
    UNICODE_WITHOUT_NUMBERS_OR_ASCII_PUNCTUATION = (
        "unicode_without_numbers_or_ascii_punctuation"
    )

    def predicate(self) -> Callable[[str], bool]:
        """Return a keep-predicate that runs on each character of a word."""
        match self:
            case CharFilter.ASCII:
                return _ascii_base
            case CharFilter.ASCII_WITHOUT_PUNCTUATION:
                return lambda c: _ascii_base(c) and c not in _ASCII_PUNCTUATION
            case CharFilter.ASCII_WITHOUT_DIGITS:
                return lambda c: _ascii_base(c) and c not in _ASCII_DIGITS
            case CharFilter.ASCII_WITHOUT_DIGITS_OR_PUNCTUATION:
                return lambda c: (
                    _ascii_base(c)
                    and c not in _ASCII_DIGITS
                    and c not in _ASCII_PUNCTUATION
                )
            case CharFilter.UNICODE:
                return _unicode_base
            case CharFilter.UNICODE_WITHOUT_ASCII_DIGITS:
                return lambda c: _unicode_base(c) and c not in _ASCII_DIGITS
            case CharFilter.UNICODE_WITHOUT_NUMBERS:
                return lambda c: _unicode_base(c) and not _is_numeric(c)
            case CharFilter.UNICODE_WITHOUT_ASCII_PUNCTUATION:
                return lambda c: _unicode_base(c) and c not in _ASCII_PUNCTUATION
            case CharFilter.UNICODE_WITHOUT_ASCII_DIGITS_OR_ASCII_PUNCTUATION:
                return lambda c: (
                    _unicode_base(c)
                    and c not in _ASCII_DIGITS
                    and c not in _ASCII_PUNCTUATION
                )
            case CharFilter.UNICODE_WITHOUT_NUMBERS_OR_ASCII_PUNCTUATION:
                return lambda c: (
                    _unicode_base(c)
                    and not _is_numeric(c)
                    and c not in _ASCII_PUNCTUATION
                )
            case _:
                raise ValueError(f"Unknown CharFilter: {self}")
