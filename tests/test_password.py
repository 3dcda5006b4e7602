"""Tests for the single-password builder."""

import string

import pytest

from genrepass.password import MAX_LENGTH_WINDOW, Password
from genrepass.settings import PasswordSettings


def make_password(rng, **overrides) -> Password:
    state = {
        "min_len": 0,
        "max_len": 0,
        "total_inserts": 0,
        "upper": 0,
        "lower": 0,
        "force_upper": False,
        "force_lower": False,
        "insertables": [],
    }
    state.update(overrides)
    return Password(rng=rng, **state)


def count_upper(text: str) -> int:
    return sum(c in string.ascii_uppercase for c in text)


def count_lower(text: str) -> int:
    return sum(c in string.ascii_lowercase for c in text)


def test_init_reserves_room_for_inserts(rng):
    settings = PasswordSettings(
        length="20-30", number_amount="2", special_chars_amount="3"
    )
    password = Password.init(settings, rng)

    assert password.total_inserts == 5
    assert (password.min_len, password.max_len) == (15, 25)
    assert len(password.insertables) == 5
    assert sum(c in string.digits for c in password.insertables) == 2
    assert all(
        c in string.digits or c in settings.special_chars
        for c in password.insertables
    )


def test_init_with_replace_keeps_the_length(rng):
    settings = PasswordSettings(
        length="20-30", number_amount="2", special_chars_amount="3", replace=True
    )
    password = Password.init(settings, rng)

    assert password.total_inserts == 5
    assert (password.min_len, password.max_len) == (20, 30)


def test_init_caps_inserts_at_the_length(rng):
    settings = PasswordSettings(
        length="3-8", number_amount="6", special_chars_amount="6"
    )

    password = Password.init(settings, rng)
    assert password.total_inserts == 3
    assert (password.min_len, password.max_len) == (0, 5)

    settings.replace = True
    password = Password.init(settings, rng)
    assert password.total_inserts == 8


def test_init_without_special_chars_only_inserts_digits(rng):
    settings = PasswordSettings(number_amount="1", special_chars_amount="3")
    settings.set_special_chars("")

    password = Password.init(settings, rng)

    assert password.insertables
    assert all(c in string.digits for c in password.insertables)


def test_init_narrows_wide_length_ranges(rng):
    settings = PasswordSettings(
        length="10-200", number_amount="0", special_chars_amount="0"
    )

    for _ in range(50):
        password = Password.init(settings, rng)
        assert password.max_len - password.min_len == MAX_LENGTH_WINDOW
        assert 10 <= password.min_len
        assert password.max_len <= 200


def test_init_keeps_length_ranges_at_the_window_width(rng):
    settings = PasswordSettings(
        length="10-60", number_amount="0", special_chars_amount="0"
    )
    password = Password.init(settings, rng)

    assert (password.min_len, password.max_len) == (10, 60)


def test_assemble_fits_exact_length(rng):
    for _ in range(20):
        password = make_password(rng, min_len=4, max_len=4)
        password.assemble(["ab", "cd"], capitalise=False, reset_amount=10)

        assert password.password in {"abcd", "cdab"}


def test_assemble_capitalises_each_word(rng):
    password = make_password(rng, min_len=4, max_len=4)
    password.assemble(["ab", "cd"], capitalise=True, reset_amount=10)

    assert password.password in {"AbCd", "CdAb"}


def test_assemble_walks_the_words_cyclically(rng):
    words = ["one", "two", "six"]
    cycle = "".join(words) * 4

    for _ in range(20):
        password = make_password(rng, min_len=15, max_len=18)
        password.assemble(words, capitalise=False, reset_amount=10)

        assert 15 <= len(password.password) <= 18
        assert password.password in cycle


def test_assemble_truncates_when_resets_run_out(rng):
    password = make_password(rng, min_len=3, max_len=5)
    password.assemble(["aaaaaaaaaa", "bbbbbbbbbb"], capitalise=False, reset_amount=2)

    assert password.reset_count == 2
    assert password.password in {"aaaaa", "bbbbb"}


def test_assemble_restarts_from_the_word_that_did_not_fit(rng):
    # Starting at "a" or "b" overshoots on "ccccccc" and restarts from it;
    # starting at "ccccccc" overshoots at once and restarts from "a".
    words = ["a", "b", "ccccccc"]

    for _ in range(30):
        password = make_password(rng, min_len=3, max_len=4)
        password.assemble(words, capitalise=False, reset_amount=1)

        assert password.reset_count == 1
        assert password.password in {"cccc", "ab"}


def test_insert_chars_adds_exactly_the_inserts(rng):
    password = make_password(rng, total_inserts=3, insertables=["1", "!", "2"])
    password.password = "abcdef"
    password.insert_chars()

    assert len(password.password) == 9
    assert sorted(c for c in password.password if not c.isalpha()) == ["!", "1", "2"]
    assert "".join(c for c in password.password if c.isalpha()) == "abcdef"


def test_insert_chars_into_an_empty_password(rng):
    password = make_password(rng, total_inserts=2, insertables=["1", "!"])
    password.insert_chars()

    assert sorted(password.password) == ["!", "1"]


def test_insert_chars_with_nothing_to_insert(rng):
    password = make_password(rng)
    password.insert_chars()

    assert password.password == ""


def test_replace_chars_keeps_the_length(rng):
    password = make_password(rng, total_inserts=3, insertables=["1", "2", "3"])
    password.password = "abcdef"
    password.replace_chars()

    assert len(password.password) == 6
    assert sum(c.isdigit() for c in password.password) == 3
    assert sum(a != b for a, b in zip(password.password, "abcdef")) == 3


def test_replace_chars_never_replaces_more_than_exists(rng):
    password = make_password(rng, total_inserts=5, insertables=list("12345"))
    password.password = "ab"
    password.replace_chars()

    assert len(password.password) == 2
    assert password.password.isdigit()


def test_ensure_case_forces_upper_when_there_is_none(rng):
    password = make_password(rng, upper=2, lower=1)
    password.password = "applebanana"
    password.ensure_case(dont_upper=False, dont_lower=False)

    assert count_upper(password.password) == 2
    assert password.password.lower() == "applebanana"


def test_ensure_case_respects_dont_upper(rng):
    password = make_password(rng, upper=2)
    password.password = "applebanana"
    password.ensure_case(dont_upper=True, dont_lower=False)

    assert password.password == "applebanana"


def test_ensure_case_forces_lower_when_there_is_none(rng):
    password = make_password(rng, upper=1, lower=2)
    password.password = "APPLE"
    password.ensure_case(dont_upper=False, dont_lower=False)

    assert count_lower(password.password) == 2
    assert password.password.upper() == "APPLE"


def test_ensure_case_tops_up_only_when_forced(rng):
    password = make_password(rng, upper=3)
    password.password = "Apple1"
    password.ensure_case(dont_upper=False, dont_lower=False)
    assert password.password == "Apple1"

    password = make_password(rng, upper=3, force_upper=True)
    password.password = "Apple1"
    password.ensure_case(dont_upper=False, dont_lower=False)
    assert count_upper(password.password) == 3
    assert password.password.lower() == "apple1"


def test_ensure_case_clamps_to_available_letters(rng):
    password = make_password(rng, upper=5)
    password.password = "ab1"
    password.ensure_case(dont_upper=False, dont_lower=False)

    assert password.password == "AB1"


def test_ensure_case_lowercases_after_uppercasing(rng):
    # Everything gets uppercased first, then one letter is lowered again.
    password = make_password(rng, upper=5, lower=1)
    password.password = "ab1"
    password.ensure_case(dont_upper=False, dont_lower=False)

    assert count_upper(password.password) == 1
    assert count_lower(password.password) == 1


def test_generate_round_trip_length(rng):
    settings = PasswordSettings(
        length="20-30",
        number_amount="1-3",
        special_chars_amount="1-3",
        reset_amount=50,
    )
    words = ["cat", "dog", "owl", "bee", "elk"]

    for _ in range(50):
        password = Password.init(settings, rng)
        inserts = password.total_inserts
        password.assemble(words, capitalise=False, reset_amount=settings.reset_amount)
        assembled = len(password.password)
        password.insert_chars()

        assert len(password.password) == assembled + inserts
        assert 20 <= len(password.password) <= 30


@pytest.mark.parametrize("replace", [False, True])
def test_generate_stays_within_length(rng, replace):
    settings = PasswordSettings(length="20-30", replace=replace, capitalise=True)
    words = ["cat", "dog", "owl", "bee", "elk"]

    for _ in range(50):
        password = Password.init(settings, rng).generate(words, settings)

        assert 20 <= len(password) <= 30
        assert password.isascii()
