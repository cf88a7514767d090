"""Frequency Indexer

Links a whitespace-delimited frequency list to lexicon words. The position
of a token in the stream is its rank (0 = most frequent); every word id
whose headword equals the token gets that rank. Tokens without a
dictionary word are skipped.
"""
import time
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from sqlalchemy import insert, select

from core.database import Base, Store
from core.logging import ingest_logger
from models.lexicon import Word, frequency

log = ingest_logger()

PROGRESS_EVERY = 10_000


@dataclass
class FrequencyStats:
    tokens: int = 0
    matched_tokens: int = 0
    rows: int = 0

    def to_dict(self) -> dict:
        return {"tokens": self.tokens, "matched_tokens": self.matched_tokens, "rows": self.rows}


def iter_tokens(path: Path | str) -> Iterator[tuple[int, str]]:
    """Yield (rank, token) across the whole file."""
    rank = 0
    with open(path, encoding="utf-8") as f:
        for line in f:
            for token in line.split():
                yield rank, token
                rank += 1


class FrequencyIndexer:
    """Rebuilds the frequency table in one transaction."""

    __slots__ = ("store", "batch_size")

    def __init__(self, store: Store, batch_size: int = 5000):
        self.store = store
        self.batch_size = batch_size

    async def run(self, path: Path | str) -> FrequencyStats:
        stats = FrequencyStats()
        start = time.perf_counter()
        log.info("frequency_import_started", file_path=str(path))

        try:
            async with self.store.transaction() as session:
                result = await session.execute(select(Word.word, Word.id).order_by(Word.id))
                word_ids: dict[str, list[int]] = defaultdict(list)
                for word, word_id in result:
                    word_ids[word].append(word_id)

                await session.run_sync(lambda s: _rebuild_frequency_table(s.connection()))

                rows: list[dict] = []
                for rank, token in iter_tokens(path):
                    stats.tokens += 1
                    ids = word_ids.get(token)
                    if ids:
                        stats.matched_tokens += 1
                        rows.extend({"word_id": word_id, "frequency": rank} for word_id in ids)

                    if len(rows) >= self.batch_size:
                        await session.execute(insert(frequency), rows)
                        stats.rows += len(rows)
                        rows = []

                    if stats.tokens % PROGRESS_EVERY == 0:
                        log.info("frequency_import_progress", tokens=stats.tokens, rows=stats.rows)

                if rows:
                    await session.execute(insert(frequency), rows)
                    stats.rows += len(rows)
        except Exception as e:
            log.error("frequency_import_failed", file_path=str(path), tokens=stats.tokens, error=str(e))
            raise

        log.info(
            "frequency_import_completed",
            tokens=stats.tokens,
            matched=stats.matched_tokens,
            rows=stats.rows,
            duration_s=round(time.perf_counter() - start, 2),
        )
        return stats


def _rebuild_frequency_table(connection) -> None:
    Base.metadata.drop_all(connection, tables=[frequency], checkfirst=True)
    Base.metadata.create_all(connection, tables=[frequency])
