"""Profanity filter applied to model output before it reaches the client."""

from __future__ import annotations

from collections.abc import Iterable
from functools import lru_cache

from better_profanity import Profanity

from relay.core.settings import get_settings


class WordFilter:
    """Word-list censor backed by `better_profanity`.

    Matched words are replaced by a fixed run of `censor_char`; the replacement
    never matches the list again, so `clean(clean(x)) == clean(x)`.
    """

    def __init__(
        self,
        *,
        extra_words: Iterable[str] = (),
        allowed_words: Iterable[str] = (),
        censor_char: str = "*",
    ):
        self._censor_char = censor_char
        self._profanity = Profanity()
        allowed = [w for w in allowed_words if w]
        if allowed:
            # Reloads the default list minus the allowed words.
            self._profanity.load_censor_words(whitelist_words=allowed)
        extra = [w for w in extra_words if w]
        if extra:
            self._profanity.add_censor_words(extra)

    def clean(self, text: str) -> str:
        if not text:
            return text
        return self._profanity.censor(text, self._censor_char)


@lru_cache
def get_word_filter() -> WordFilter:
    # Loading the word list reads a file and builds variants; do it once per process.
    settings = get_settings()
    return WordFilter(
        extra_words=settings.profanity_extra_words,
        allowed_words=settings.profanity_allowed_words,
    )
