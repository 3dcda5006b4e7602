import random

import pytest

from genrepass.settings import PasswordSettings


@pytest.fixture
def rng():
    """Seeded generator so randomised behaviour is repeatable"""
    return random.Random(1234)


@pytest.fixture
def fruit_settings():
    settings = PasswordSettings(
        length="10-15",
        number_amount="1",
        special_chars_amount="0",
        upper_amount="0",
        lower_amount="0",
    )
    settings.get_words_from_str("apple banana cherry")
    return settings


@pytest.fixture
def corpus(tmp_path):
    """A small directory tree of text and non-text files."""
    root = tmp_path / "corpus"
    root.mkdir()
    (root / "a.txt").write_text("alpha beta", encoding="utf-8")
    (root / "b.md").write_text("gamma", encoding="utf-8")
    (root / "noext").write_text("delta", encoding="utf-8")
    (root / ".hidden.txt").write_text("secret", encoding="utf-8")
    (root / ".hiddendir").mkdir()
    (root / ".hiddendir" / "c.txt").write_text("concealed", encoding="utf-8")
    (root / "image.png").write_bytes(b"\x89PNG\r\n\x1a\nnot really")
    (root / "notes.pdf").write_text("pdfword", encoding="utf-8")
    (root / "bad.txt").write_bytes(b"\xff\xfe\xfa broken")
    (root / "sub").mkdir()
    (root / "sub" / "d.txt").write_text("epsilon", encoding="utf-8")
    (root / "sub" / "deeper").mkdir()
    (root / "sub" / "deeper" / "e.TXT").write_text("zeta", encoding="utf-8")
    return root
