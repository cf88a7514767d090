from models.lexicon import (
    Word, Sense, Form, Pronunciation, Synonym,
    examples, sense_synonyms, sense_tags, form_tags, pronunciation_tags, frequency,
    LEXICON_TABLES,
)
from models.ledger import Lemma, sentences
from models.schedule import CardRecord

__all__ = [
    "Word", "Sense", "Form", "Pronunciation", "Synonym",
    "examples", "sense_synonyms", "sense_tags", "form_tags", "pronunciation_tags", "frequency",
    "LEXICON_TABLES",
    "Lemma", "sentences",
    "CardRecord",
]
