from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
import os
from pathlib import Path
import random
import secrets
import stat
from typing import Any

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    ValidationInfo,
    field_validator,
)
from readerwriterlock import rwlock

from genrepass.config import config
from genrepass.entities import (
    NonAsciiSpecialCharsError,
    NotEnoughWordsError,
    ParseRangeError,
    RangeSpec,
    WordIndexError,
)
from genrepass.password import Password
from genrepass.utils import find_words, parse_range, to_ascii
from genrepass.walker import read_text_from_paths


def _config_range(name: str):
    return lambda: parse_range(getattr(config, name))


class PasswordSettings(BaseModel):
    """Configuration for the password generator, plus the words to build from.

    Range settings accept a ``RangeSpec``, a ``(min, max)`` pair, an exact
    amount or a string like ``"24-30"``; they are validated on assignment
    and keep their old value when validation fails.

    Reading and adding words goes through a reader/writer lock, so any
    number of ``generate`` calls can run together but never alongside a
    change to the word list.
    """

    model_config = ConfigDict(validate_assignment=True)

    # Uppercase the first character of every word
    capitalise: bool = False
    # Replace characters at random positions instead of inserting
    replace: bool = False
    # Shuffle the whole word list every time words are added
    randomise: bool = False
    # Treat blocks of digits from the source text as words
    keep_numbers: bool = False
    force_upper: bool = False
    force_lower: bool = False
    # Never change case, ignoring force_upper/force_lower
    dont_upper: bool = False
    dont_lower: bool = False

    pass_amount: int = Field(default_factory=lambda: config.pass_amount, ge=0)
    # Restarts allowed when the words overshoot the length before truncating
    reset_amount: int = Field(default_factory=lambda: config.reset_amount, ge=0)

    length: RangeSpec = Field(default_factory=_config_range("length"))
    number_amount: RangeSpec = Field(default_factory=_config_range("number_amount"))
    special_chars_amount: RangeSpec = Field(
        default_factory=_config_range("special_chars_amount")
    )
    upper_amount: RangeSpec = Field(default_factory=_config_range("upper_amount"))
    lower_amount: RangeSpec = Field(default_factory=_config_range("lower_amount"))

    special_chars: str = Field(
        default_factory=lambda: config.special_chars, validate_default=True
    )

    _words: list[str] = PrivateAttr(default_factory=list)
    _lock: rwlock.RWLockFairD = PrivateAttr(default_factory=rwlock.RWLockFairD)

    @field_validator(
        "length",
        "number_amount",
        "special_chars_amount",
        "upper_amount",
        "lower_amount",
        mode="before",
    )
    @classmethod
    def _coerce_range(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            try:
                return parse_range(value)
            except ParseRangeError as err:
                raise ParseRangeError(
                    err.kind, err.value, field=info.field_name
                ) from err
        if isinstance(value, int) and not isinstance(value, bool):
            return RangeSpec.exact(value)
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return RangeSpec(min=value[0], max=value[1])
        return value

    @field_validator("special_chars")
    @classmethod
    def _check_special_chars(cls, value: str) -> str:
        if not value.isascii():
            raise NonAsciiSpecialCharsError(value)
        return value

    def set_special_chars(self, chars: str) -> None:
        """Set the special characters to insert. Only ASCII is accepted."""
        self.special_chars = chars

    @property
    def words(self) -> tuple[str, ...]:
        with self._lock.gen_rlock():
            return tuple(self._words)

    def get_words_from_path(self, path: str | os.PathLike[str]) -> None:
        """Extract words from a text file or a directory of text files.

        Directories are read recursively, skipping hidden entries, symlinks
        and files that aren't UTF-8 text. Errors reading the path itself
        are raised; errors on files found inside a directory are not.
        """
        path = Path(path)

        if stat.S_ISDIR(path.stat().st_mode):
            text = read_text_from_paths([path])
        else:
            text = path.read_text(encoding="utf-8")

        self.get_words_from_str(text)

    def get_words_from_str(self, text: str, rng: random.Random | None = None) -> None:
        """Extract words from a string.

        Non-ASCII text is transliterated to ASCII first, so foreign words
        get a phonetic spelling and emoji turn into their names.
        """
        if not text:
            return

        words = find_words(to_ascii(text), self.keep_numbers)
        logger.debug(f"Extracted {len(words)} words")
        self._add(words, rng)

    def add_words(self, words: Iterable[str], rng: random.Random | None = None) -> None:
        """Add already split words, e.g. the words of a ``Lexicon``."""
        cleaned = ["".join(to_ascii(word).split()) for word in words]
        self._add([word for word in cleaned if word], rng)

    def _add(self, words: list[str], rng: random.Random | None) -> None:
        with self._lock.gen_wlock():
            self._words.extend(words)
            if self.randomise:
                (rng or secrets.SystemRandom()).shuffle(self._words)

    def randomise_words(self, rng: random.Random | None = None) -> None:
        with self._lock.gen_wlock():
            (rng or secrets.SystemRandom()).shuffle(self._words)

    def clear_words(self) -> None:
        with self._lock.gen_wlock():
            self._words.clear()

    def remove_word_at(self, index: int) -> str:
        with self._lock.gen_wlock():
            if not 0 <= index < len(self._words):
                raise WordIndexError(index, len(self._words))
            return self._words.pop(index)

    def _ensure_enough_words(self) -> None:
        # A single word can't be followed by a different one while assembling.
        if len(self._words) < 2:
            raise NotEnoughWordsError(len(self._words))

    def generate(self, rng: random.Random | None = None) -> list[str]:
        """Generate ``pass_amount`` passwords one after another."""
        with self._lock.gen_rlock():
            self._ensure_enough_words()
            return [
                Password.init(self, rng).generate(self._words, self)
                for _ in range(self.pass_amount)
            ]

    def generate_parallel(self, max_workers: int | None = None) -> list[str]:
        """Generate ``pass_amount`` passwords on a thread pool.

        Passwords come back in the order they finish, not the order they
        were started in.
        """
        with self._lock.gen_rlock():
            self._ensure_enough_words()
            builders = [Password.init(self) for _ in range(self.pass_amount)]

            logger.debug(f"Generating {len(builders)} passwords in parallel")
            with ThreadPoolExecutor(
                max_workers=max_workers or config.parallel_workers
            ) as executor:
                futures = [
                    executor.submit(builder.generate, self._words, self)
                    for builder in builders
                ]
                return [future.result() for future in as_completed(futures)]
