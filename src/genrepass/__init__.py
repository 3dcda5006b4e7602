"""Generate a readable password from an ordered list of words extracted from text.

Numbers and special characters are inserted at random places and the letter
case is balanced afterwards.
"""

from importlib.metadata import PackageNotFoundError, version

from loguru import logger

from genrepass.entities import (
    CharFilter,
    GenrepassError,
    NonAsciiSpecialCharsError,
    NotEnoughWordsError,
    ParseRangeError,
    RangeErrorKind,
    RangeSpec,
    Split,
    Transliterate,
    WordIndexError,
)
from genrepass.lexicon import Lexicon
from genrepass.settings import PasswordSettings
from genrepass.utils import parse_range


try:
    __version__ = version("genrepass")
except PackageNotFoundError:
    __version__ = "0.0.0"

logger.disable("genrepass")

__all__ = [
    "CharFilter",
    "GenrepassError",
    "Lexicon",
    "NonAsciiSpecialCharsError",
    "NotEnoughWordsError",
    "ParseRangeError",
    "PasswordSettings",
    "RangeErrorKind",
    "RangeSpec",
    "Split",
    "Transliterate",
    "WordIndexError",
    "parse_range",
]
