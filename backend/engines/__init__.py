from engines.fsrs import Card, Grade, review_card
from engines.lexicon import Entry, LexiconReader
from engines.lemmatizer import Lemmatizer, LemmatizeStats
from engines.queue import QueueRanker, QueueSignals
from engines.schedule import ScheduleStore
from engines.service import VocabularyService

__all__ = [
    "Card",
    "Grade",
    "review_card",
    "Entry",
    "LexiconReader",
    "Lemmatizer",
    "LemmatizeStats",
    "QueueRanker",
    "QueueSignals",
    "ScheduleStore",
    "VocabularyService",
]
