"""Language-independent text folding via ICU transliteration.

``"Créatinine Sérique"``, ``"CREATININE  SERIQUE"`` and
``"créatinine-sérique"`` all fold to ``"creatinine serique"``; Cyrillic and
Greek input is transliterated to Latin first.
"""

import re
import threading
import unicodedata
from typing import ClassVar

import icu  # type: ignore[import-untyped]


class TextFolder:
    """Folds free text into a lowercase ASCII comparison key.

    ICU transliterators are not thread-safe, so each thread gets its own
    instance, created on first use; one folder can be shared across threads.
    """

    _ICU_TRANSFORM: ClassVar[str] = "Any-Latin; Latin-ASCII; Lower"

    _NON_WORD_RE: ClassVar[re.Pattern[str]] = re.compile(r"[^a-z0-9]+")
    _NON_LETTER_RE: ClassVar[re.Pattern[str]] = re.compile(r"[^a-z\s]+")
    _WHITESPACE_RE: ClassVar[re.Pattern[str]] = re.compile(r"\s+")

    def __init__(self) -> None:
        self._local = threading.local()

    def _transliterator(self) -> icu.Transliterator:
        transliterator = getattr(self._local, "transliterator", None)
        if transliterator is None:
            transliterator = icu.Transliterator.createInstance(self._ICU_TRANSFORM)
            self._local.transliterator = transliterator
        return transliterator

    def transliterate(self, text: str) -> str:
        return self._transliterator().transliterate(unicodedata.normalize("NFC", text))

    def fold(self, text: str) -> str:
        """Lowercase ASCII, punctuation replaced by spaces, whitespace collapsed."""
        return self._NON_WORD_RE.sub(" ", self.transliterate(text)).strip()

    def letters_only(self, text: str) -> str:
        """Non-letters removed, whitespace collapsed: ``"O'Brien, Mary"`` -> ``"obrien mary"``."""
        letters = self._NON_LETTER_RE.sub("", self.transliterate(text))
        return self._WHITESPACE_RE.sub(" ", letters).strip()
