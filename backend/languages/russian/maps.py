"""Russian dictionary tag mappings for Wiktionary (wiktextract) dumps."""
from enum import Enum


class WordClass(str, Enum):
    """Closed set of word classes kept from the dictionary dump.

    Values are the dump's ``pos`` codes and are stored verbatim in ``words.pos``.
    """
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adj"
    ADVERB = "adv"
    DETERMINER = "det"
    PARTICLE = "particle"
    INTERJECTION = "intj"
    CONJUNCTION = "conj"
    PRONOUN = "pron"
    PREPOSITION = "prep"

    @classmethod
    def codes(cls) -> frozenset[str]:
        return frozenset(member.value for member in cls)


# Only inflection tables produce real forms
FORM_SOURCES = frozenset({"declension", "conjugation"})

# Template artifacts that wiktextract reports as forms
EXCLUDED_FORM_TAGS = frozenset({"inflection-template", "table-tags", "class"})

FORM_OF_TAG = "form-of"

# Stressed vowel (base + U+0301 COMBINING ACUTE ACCENT) -> plain vowel, applied in order
ACCENTED_VOWELS = (
    ("а́", "а"),
    ("е́", "е"),
    ("и́", "и"),
    ("о́", "о"),
    ("у́", "у"),
    ("э́", "э"),
    ("ы́", "ы"),
    ("ю́", "ю"),
    ("я́", "я"),
)
