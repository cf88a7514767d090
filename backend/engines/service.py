"""Vocabulary Service

Single entry point for callers (HTTP routes, command line). Every store
operation returns a Result: exceptions raised by the engines (driver
errors, file errors, malformed dump lines) are mapped to AppError at this
boundary, after the transaction that raised them has rolled back.

Writes run through ``Store.run``: a caller that abandons the await (a
dropped HTTP request, a cancelled task) does not interrupt a transaction
that has started.
"""
from pathlib import Path

from core.config import Settings, get_settings
from core.database import Store
from core.errors import AppError, Ok, Result, map_db_errors, out_of_range
from engines.fsrs import Card, Grade, review_card
from engines.lemmatizer import Lemmatizer, LemmatizeStats
from engines.lexicon import Entry, LexiconReader
from engines.queue import QueueRanker, QueueSignals
from engines.schedule import ScheduleStore
from ingest.dictionary import DictionaryImporter, ImportStats
from ingest.frequency import FrequencyIndexer, FrequencyStats
from languages.russian.maps import WordClass


class VocabularyService:
    """Lexicon, ledger, queue and schedule operations over one store."""

    __slots__ = ("store", "settings", "lexicon", "lemmatizer", "queue", "schedule")

    def __init__(self, store: Store, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()
        self.lexicon = LexiconReader(store)
        self.lemmatizer = Lemmatizer(store, self.settings)
        self.queue = QueueRanker(store, self.settings)
        self.schedule = ScheduleStore(store, self.settings)

    # -------------------------------------------------------------------------
    # Lexicon
    # -------------------------------------------------------------------------

    @map_db_errors("dictionary_import")
    async def import_dictionary(self, path: Path | str) -> Result[ImportStats, AppError]:
        return Ok(await self.store.run(DictionaryImporter(self.store).run(path)))

    @map_db_errors("frequency_import")
    async def import_frequency(self, path: Path | str) -> Result[FrequencyStats, AppError]:
        return Ok(await self.store.run(FrequencyIndexer(self.store).run(path)))

    @map_db_errors("lexicon")
    async def lookup_entries(self, word: str) -> Result[list[Entry], AppError]:
        return Ok(await self.lexicon.lookup_entries(word))

    # -------------------------------------------------------------------------
    # Ledger
    # -------------------------------------------------------------------------

    @map_db_errors("lemmatizer")
    async def lemmatize(self, text: str, capture_sentences: bool = False) -> Result[LemmatizeStats, AppError]:
        return Ok(await self.store.run(self.lemmatizer.lemmatize(text, capture_sentences)))

    @map_db_errors("lemmatizer")
    async def lemmatize_from_file(
        self, path: Path | str, capture_sentences: bool = False
    ) -> Result[LemmatizeStats, AppError]:
        return Ok(await self.store.run(self.lemmatizer.lemmatize_from_file(path, capture_sentences)))

    @map_db_errors("ledger")
    async def rebuild_ledger(self, keep_blacklist: bool = False) -> Result[None, AppError]:
        await self.store.run(self.lemmatizer.rebuild_ledger(keep_blacklist))
        return Ok(None)

    @map_db_errors("ledger")
    async def blacklist(self, lemma: str) -> Result[bool, AppError]:
        return Ok(await self.store.run(self.lemmatizer.blacklist(lemma)))

    @map_db_errors("ledger")
    async def get_sentences(self, lemma: str) -> Result[list[str], AppError]:
        return Ok(await self.lemmatizer.get_sentences(lemma))

    @map_db_errors("queue")
    async def next_queue_page(
        self,
        offset: int,
        signals: QueueSignals,
        pos_filter: set[WordClass] | frozenset[WordClass] = frozenset(),
    ) -> Result[list[str], AppError]:
        if offset < 0:
            return out_of_range("offset", offset, min_val=0, origin="queue")
        return Ok(await self.queue.next_page(offset, signals, pos_filter))

    # -------------------------------------------------------------------------
    # Schedule
    # -------------------------------------------------------------------------

    @map_db_errors("schedule")
    async def rebuild_schedule(self) -> Result[None, AppError]:
        await self.store.run(self.schedule.rebuild_schedule())
        return Ok(None)

    @map_db_errors("schedule")
    async def insert_card(self, native: str, target: str, now: int | None = None) -> Result[Card, AppError]:
        return Ok(await self.store.run(self.schedule.insert_card(native, target, now)))

    @map_db_errors("schedule")
    async def due_cards(self, as_of: int) -> Result[list[Card], AppError]:
        return Ok(await self.schedule.due_cards(as_of))

    def review_card(self, card: Card, grade: Grade, review_time: int) -> Card:
        """Pure; persist the result with update_cards."""
        return review_card(card, grade, review_time, self.settings.TARGET_RETENTION)

    @map_db_errors("schedule")
    async def update_cards(self, cards: list[Card]) -> Result[None, AppError]:
        await self.store.run(self.schedule.update_cards(cards))
        return Ok(None)

    @map_db_errors("export")
    async def export_cards(self, path: Path | str) -> Result[int, AppError]:
        return Ok(await self.store.run(self.schedule.export_cards(path)))
