from __future__ import annotations

from collections.abc import Sequence
import random
import secrets
import string
from typing import TYPE_CHECKING

from loguru import logger

from genrepass.utils import capitalise_at, capitalise_first, decapitalise_at


if TYPE_CHECKING:
    from genrepass.settings import PasswordSettings


# Wider length ranges get narrowed to a random window this wide.
MAX_LENGTH_WINDOW = 50
# Chance of adding another word once the minimum length is reached.
CONTINUE_PROBABILITY = 0.8

_DIGITS = string.digits
_UPPER = frozenset(string.ascii_uppercase)
_LOWER = frozenset(string.ascii_lowercase)


def _indices_of(chars: Sequence[str], alphabet: frozenset[str]) -> list[int]:
    return [i for i, c in enumerate(chars) if c in alphabet]


class Password:
    """State for building a single password.

    Built once per password with ``Password.init`` and consumed by
    ``generate``; instances are never reused.
    """

    def __init__(
        self,
        *,
        min_len: int,
        max_len: int,
        total_inserts: int,
        upper: int,
        lower: int,
        force_upper: bool,
        force_lower: bool,
        insertables: list[str],
        rng: random.Random,
    ) -> None:
        self.password = ""
        self.reset_count = 0
        self.min_len = min_len
        self.max_len = max_len
        self.total_inserts = total_inserts
        self.upper = upper
        self.lower = lower
        self.force_upper = force_upper
        self.force_lower = force_lower
        self.insertables = insertables
        self.rng = rng

    @classmethod
    def init(
        cls, settings: PasswordSettings, rng: random.Random | None = None
    ) -> Password:
        rng = rng or secrets.SystemRandom()

        min_len = settings.length.min
        max_len = settings.length.max
        if settings.length.width > MAX_LENGTH_WINDOW:
            min_len = rng.randint(min_len, max_len - MAX_LENGTH_WINDOW)
            max_len = min_len + MAX_LENGTH_WINDOW

        numbers = settings.number_amount.sample(rng)
        specials = (
            settings.special_chars_amount.sample(rng) if settings.special_chars else 0
        )
        upper = settings.upper_amount.sample(rng)
        lower = settings.lower_amount.sample(rng)

        total_inserts = min(numbers + specials, max_len)

        # Make room for the inserted characters up front.
        if not settings.replace:
            total_inserts = min(total_inserts, min_len)
            min_len -= total_inserts
            max_len -= total_inserts

        insertables = [rng.choice(_DIGITS) for _ in range(numbers)]
        insertables.extend(rng.choice(settings.special_chars) for _ in range(specials))
        rng.shuffle(insertables)

        return cls(
            min_len=min_len,
            max_len=max_len,
            total_inserts=total_inserts,
            upper=upper,
            lower=lower,
            force_upper=settings.force_upper,
            force_lower=settings.force_lower,
            insertables=insertables,
            rng=rng,
        )

    def generate(self, words: Sequence[str], settings: PasswordSettings) -> str:
        self.assemble(words, settings.capitalise, settings.reset_amount)

        if settings.replace:
            self.replace_chars()
        else:
            self.insert_chars()

        self.ensure_case(settings.dont_upper, settings.dont_lower)

        password, self.password = self.password, ""
        return password

    def assemble(
        self, words: Sequence[str], capitalise: bool, reset_amount: int
    ) -> None:
        """Walk the words cyclically from a random start until the length fits.

        If the next word would overshoot ``max_len`` while the password is
        still too short, start over from that word, up to ``reset_amount``
        times, then truncate to ``max_len``.
        """
        count = len(words)
        cursor = self.rng.randrange(count)
        parts: list[str] = []
        length = 0

        while True:
            word = words[cursor]
            parts.append(capitalise_first(word) if capitalise else word)
            length += len(word)

            cursor = (cursor + 1) % count
            next_word = words[cursor]
            allowance = max(self.max_len - length, 0)

            if len(next_word) > allowance:
                if self.min_len <= length <= self.max_len:
                    break

                if self.reset_count >= reset_amount:
                    logger.debug(
                        f"Truncating to {self.max_len} after {self.reset_count} resets"
                    )
                    self.password = "".join(parts)[: self.max_len]
                    return

                self.reset_count += 1
                parts.clear()
                length = 0
                continue

            if length < self.min_len:
                continue

            if self.rng.random() < CONTINUE_PROBABILITY:
                continue

            break

        self.password = "".join(parts)

    def insert_chars(self) -> None:
        chars = list(self.password)

        # Only index 0 exists in an empty password.
        if not chars and self.total_inserts > 0:
            chars.append(self.insertables.pop())
            self.total_inserts -= 1

        for _ in range(self.total_inserts):
            chars.insert(self.rng.randrange(len(chars)), self.insertables.pop())

        self.password = "".join(chars)

    def replace_chars(self) -> None:
        count = min(self.total_inserts, len(self.password))
        positions = set(self.rng.sample(range(len(self.password)), count))

        self.password = "".join(
            self.insertables.pop() if i in positions else c
            for i, c in enumerate(self.password)
        )

    def ensure_case(self, dont_upper: bool, dont_lower: bool) -> None:
        chars = list(self.password)

        upper_count = len(_indices_of(chars, _UPPER))
        lower_indices = _indices_of(chars, _LOWER)

        if upper_count == 0:
            self.force_upper = True
        elif upper_count >= self.upper:
            self.force_upper = False
        else:
            self.upper -= upper_count

        self.upper = min(self.upper, len(lower_indices))

        if self.force_upper and not dont_upper:
            for i in self.rng.sample(lower_indices, self.upper):
                capitalise_at(chars, i)

        # Lowercasing looks at the password as left by the uppercasing above.
        upper_indices = _indices_of(chars, _UPPER)
        lower_count = len(_indices_of(chars, _LOWER))

        if lower_count == 0:
            self.force_lower = True
        elif lower_count >= self.lower:
            self.force_lower = False
        else:
            self.lower -= lower_count

        self.lower = min(self.lower, len(upper_indices))

        if self.force_lower and not dont_lower:
            for i in self.rng.sample(upper_indices, self.lower):
                decapitalise_at(chars, i)

        self.password = "".join(chars)
