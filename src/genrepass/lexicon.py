from __future__ import annotations

from collections.abc import Callable, Iterable
import os
import random
import re
import secrets

from loguru import logger
from pydantic import BaseModel, ConfigDict, PrivateAttr, model_validator
from unidecode import unidecode
from uniseg.wordbreak import words as word_bound_segments

from genrepass.entities import (
    ASCII_WHITESPACE,
    UNICODE_WHITESPACE,
    Split,
    Transliterate,
    WordIndexError,
)
from genrepass.walker import read_text_from_paths


_ASCII_WHITESPACE_RE = re.compile(f"[{re.escape(ASCII_WHITESPACE)}]+")
_UNICODE_WHITESPACE_RE = re.compile(f"[{re.escape(UNICODE_WHITESPACE)}]+")


def _has_alphanumeric(segment: str) -> bool:
    return any(c.isalpha() or c.isnumeric() for c in segment)


def split_text(text: str, split: Split, delimiters: str = "") -> list[str]:
    match split:
        case Split.UNICODE_WORDS:
            return [s for s in word_bound_segments(text) if _has_alphanumeric(s)]
        case Split.WORD_BOUNDS:
            return list(word_bound_segments(text))
        case Split.UNICODE_WHITESPACE:
            return [s for s in _UNICODE_WHITESPACE_RE.split(text) if s]
        case Split.ASCII_WHITESPACE:
            return [s for s in _ASCII_WHITESPACE_RE.split(text) if s]
        case Split.CHAR_DELIMITED:
            pattern = f"[{re.escape(delimiters)}]+"
            return [s for s in re.split(pattern, text) if s]
        case _:
            raise ValueError(f"Unknown Split: {split}")


class Lexicon(BaseModel):
    """A list of words used for password generation.

    Words accumulate across calls to ``extract_words`` and
    ``extract_words_from_path``. With ``randomise`` set, the whole list is
    reshuffled after every call, not only the words that were just added.

    Transliteration turns any non-ASCII text into ASCII with ``unidecode``;
    emoji become their names and some characters expand into several
    letters or vanish altogether.
    """

    model_config = ConfigDict(validate_assignment=True)

    split: Split = Split.UNICODE_WORDS
    delimiters: str = ""
    transliterate: Transliterate = Transliterate.OFF
    randomise: bool = False

    _words: list[str] = PrivateAttr(default_factory=list)

    @model_validator(mode="after")
    def _check_delimiters(self) -> Lexicon:
        if self.split == Split.CHAR_DELIMITED and not self.delimiters:
            raise ValueError("char_delimited split needs at least one delimiter")
        return self

    @property
    def words(self) -> list[str]:
        return list(self._words)

    def extract_words(
        self,
        text: str,
        keep: Callable[[str], bool],
        rng: random.Random | None = None,
    ) -> None:
        """Split ``text`` into words and keep only the characters ``keep`` accepts.

        Words left empty by filtering are dropped.
        """
        if not text:
            return

        if self.transliterate == Transliterate.BEFORE_SPLIT:
            text = unidecode(text)

        added = 0
        for word in split_text(text, self.split, self.delimiters):
            if self.transliterate == Transliterate.BEFORE_FILTER:
                word = unidecode(word)

            word = "".join(c for c in word if keep(c))

            if self.transliterate == Transliterate.AFTER_FILTER:
                word = unidecode(word)

            if not word:
                continue

            self._words.append(word)
            added += 1

        logger.debug(
            f"Extracted {added} words ({self.split}), {len(self._words)} total"
        )

        if self.randomise:
            self.shuffle(rng)

    def extract_words_from_path(
        self,
        paths: Iterable[str | os.PathLike[str]],
        depth: int | None,
        extensions: Iterable[str] | None,
        keep: Callable[[str], bool],
        rng: random.Random | None = None,
    ) -> None:
        """Extract words from every readable UTF-8 text file under ``paths``.

        Hidden entries and symlinks below the roots are skipped, as are
        binary formats like PDFs and images. When ``extensions`` is given,
        only files with one of those extensions are read.
        """
        text = read_text_from_paths(paths, depth=depth, extensions=extensions)
        self.extract_words(text, keep, rng=rng)

    def shuffle(self, rng: random.Random | None = None) -> None:
        (rng or secrets.SystemRandom()).shuffle(self._words)

    def clear_words(self) -> None:
        self._words.clear()

    def remove_word_at(self, index: int) -> str:
        if not 0 <= index < len(self._words):
            raise WordIndexError(index, len(self._words))
        return self._words.pop(index)
