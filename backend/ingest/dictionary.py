"""Dictionary Importer

Rebuilds the lexicon from a wiktextract JSONL dump:
1. Drops and recreates every lexicon table (frequency included)
2. Streams the dump, skipping records that do not apply
3. Inserts parent rows one at a time to obtain their ids, and batches
   child rows (tags, examples, synonym links) with executemany

Everything happens in one store transaction, so a malformed line leaves
the lexicon exactly as it was before the import.
"""
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import Table, insert
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import Base, Store
from core.logging import ingest_logger
from ingest.parsers.wiktextract import SenseRecord, WiktextractParser, WordRecord
from languages.russian.text import normalize
from models.lexicon import (
    LEXICON_TABLES,
    Form,
    Pronunciation,
    Sense,
    Synonym,
    Word,
    examples,
    form_tags,
    pronunciation_tags,
    sense_synonyms,
    sense_tags,
)

log = ingest_logger()


@dataclass
class ImportStats:
    """Statistics for a dictionary import run."""
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None
    lines_read: int = 0
    words: int = 0
    senses: int = 0
    forms: int = 0
    pronunciations: int = 0
    synonyms: int = 0
    records_skipped: int = 0

    def to_dict(self) -> dict:
        return {
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "lines_read": self.lines_read,
            "words": self.words,
            "senses": self.senses,
            "forms": self.forms,
            "pronunciations": self.pronunciations,
            "synonyms": self.synonyms,
            "records_skipped": self.records_skipped,
        }


def rebuild_lexicon_schema(connection) -> None:
    """Drop and recreate the lexicon tables on a sync connection."""
    Base.metadata.drop_all(connection, tables=LEXICON_TABLES, checkfirst=True)
    Base.metadata.create_all(connection, tables=LEXICON_TABLES)


class DictionaryImporter:
    """Populates the lexicon from a dump inside a single transaction."""

    __slots__ = ("store", "batch_size", "_synonym_cache", "_pending")

    def __init__(self, store: Store, batch_size: int = 1000):
        self.store = store
        self.batch_size = batch_size
        self._synonym_cache: dict[str, int] = {}
        self._pending: dict[Table, list[dict]] = defaultdict(list)

    async def run(self, path: Path | str) -> ImportStats:
        stats = ImportStats()
        parser = WiktextractParser()
        self._synonym_cache.clear()
        self._pending.clear()
        start = time.perf_counter()
        log.info("dictionary_import_started", file_path=str(path))

        try:
            async with self.store.transaction() as session:
                await session.run_sync(lambda s: rebuild_lexicon_schema(s.connection()))

                for _, record in parser.parse_file(path):
                    if await self._import_record(session, record, stats):
                        if stats.words % self.batch_size == 0:
                            await self._flush(session)
                    else:
                        stats.records_skipped += 1

                await self._flush(session)
        except Exception as e:
            log.error("dictionary_import_failed", file_path=str(path), line=parser.lines, error=str(e))
            raise

        stats.lines_read = parser.lines
        stats.records_skipped += parser.skipped
        stats.completed_at = datetime.now(timezone.utc)
        log.info(
            "dictionary_import_completed",
            words=stats.words,
            senses=stats.senses,
            forms=stats.forms,
            skipped=stats.records_skipped,
            duration_s=round(time.perf_counter() - start, 2),
        )
        return stats

    async def _import_record(self, session: AsyncSession, record: WordRecord, stats: ImportStats) -> bool:
        """Insert one record; False when no sense survives the form-of filter."""
        if not record.kept_senses():
            return False

        values = {"word": record.word, "pos": record.pos}
        if record.etymology_text is not None:
            values["etymology"] = record.etymology_text
        if record.expansion is not None:
            values["expansion"] = record.expansion
        word_id = await self._insert_returning_id(session, Word.__table__, values)
        stats.words += 1

        for relevance, sense in record.kept_senses():
            await self._import_sense(session, word_id, relevance, sense)
            stats.senses += 1

        for form in record.kept_forms():
            form_id = await self._insert_returning_id(session, Form.__table__, {
                "word_id": word_id,
                "form": form.form,
                "normalized_form": normalize(form.form),
            })
            self._pending[form_tags].extend({"form_id": form_id, "tag": tag} for tag in form.tags)
            stats.forms += 1

        for sound in record.sounds:
            if sound.ipa is None:
                continue
            pronunciation_id = await self._insert_returning_id(session, Pronunciation.__table__, {
                "word_id": word_id,
                "ipa": sound.ipa,
            })
            self._pending[pronunciation_tags].extend(
                {"pronunciation_id": pronunciation_id, "tag": tag} for tag in sound.tags
            )
            stats.pronunciations += 1

        stats.synonyms = len(self._synonym_cache)
        return True

    async def _import_sense(self, session: AsyncSession, word_id: int, relevance: int, sense: SenseRecord) -> None:
        values = {"word_id": word_id, "relevance": relevance}
        if sense.gloss is not None:
            values["sense"] = sense.gloss
        sense_id = await self._insert_returning_id(session, Sense.__table__, values)

        self._pending[sense_tags].extend({"sense_id": sense_id, "tag": tag} for tag in sense.tags)
        self._pending[examples].extend(
            {"sense_id": sense_id, "text": example.text, "english": example.english}
            for example in sense.examples
        )
        for synonym in sense.synonyms:
            synonym_id = await self._synonym_id(session, synonym.word)
            self._pending[sense_synonyms].append({"sense_id": sense_id, "synonym_id": synonym_id})

    async def _synonym_id(self, session: AsyncSession, synonym: str) -> int:
        """Insert-or-reuse a synonym row."""
        synonym_id = self._synonym_cache.get(synonym)
        if synonym_id is None:
            synonym_id = await self._insert_returning_id(session, Synonym.__table__, {"synonym": synonym})
            self._synonym_cache[synonym] = synonym_id
        return synonym_id

    @staticmethod
    async def _insert_returning_id(session: AsyncSession, table: Table, values: dict) -> int:
        result = await session.execute(insert(table).values(**values))
        return result.inserted_primary_key[0]

    async def _flush(self, session: AsyncSession) -> None:
        """Write batched child rows."""
        for table, rows in self._pending.items():
            if rows:
                await session.execute(insert(table), rows)
        self._pending.clear()
