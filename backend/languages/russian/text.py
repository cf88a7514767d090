"""Russian text processing: accent stripping, tokenizing, sentence splitting.

Word forms are runs of Cyrillic letters (ё included), lowercased. Everything
else, digits and Latin script included, separates words.
"""
import re

from .maps import ACCENTED_VOWELS

_NON_CYRILLIC = re.compile(r"[^А-яЁё]+")

# A run ending in terminal punctuation, optionally closed by a guillemet,
# or a trailing run without terminal punctuation
_SENTENCE = re.compile(r"[^.!?…]*[.!?…]+»?|[^.!?…]+$")


def normalize(form: str) -> str:
    """Strip stress marks from the accented vowels.

    Idempotent; text without stress marks is returned unchanged.
    """
    for accented, plain in ACCENTED_VOWELS:
        form = form.replace(accented, plain)
    return form


def tokenize(text: str) -> list[str]:
    """Split text into lowercase, unstressed Cyrillic word forms."""
    return _NON_CYRILLIC.sub(" ", normalize(text.lower())).split()


def split_sentences(text: str) -> list[str]:
    """Split text into stripped, non-empty sentences."""
    sentences = []
    for match in _SENTENCE.finditer(text):
        sentence = " ".join(match.group(0).split())
        if sentence:
            sentences.append(sentence)
    return sentences
