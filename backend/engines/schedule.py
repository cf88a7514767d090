"""Schedule Store

Persists review cards. Creating or updating a card blacklists its target
lemma in the ledger (same transaction) so it leaves the study queue.
"""
import csv
import time
from pathlib import Path

from sqlalchemy import insert, select, update

from core.config import Settings, get_settings
from core.database import Store
from core.errors import AppErrorException, file_write_error, invariant_violated
from core.logging import srs_logger
from engines.fsrs import Card, start_of_day
from engines.lemmatizer import blacklist_lemma
from models.schedule import CardRecord

log = srs_logger()

ANKI_HEADER = "#separator:Semicolon\n#html:false\n"


def _to_card(record: CardRecord) -> Card:
    return Card(
        id=record.id,
        native=record.native,
        target=record.target,
        due=record.due,
        stability=record.stability,
        difficulty=record.difficulty,
    )


def _rebuild_cards_table(connection) -> None:
    table = CardRecord.__table__
    table.drop(connection, checkfirst=True)
    table.create(connection)


class ScheduleStore:
    __slots__ = ("store", "settings")

    def __init__(self, store: Store, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    async def rebuild_schedule(self) -> None:
        async with self.store.transaction() as session:
            await session.run_sync(lambda s: _rebuild_cards_table(s.connection()))
        log.info("schedule_rebuilt")

    async def insert_card(self, native: str, target: str, now: int | None = None) -> Card:
        """Create a new card, due at the start of the current study day."""
        now = int(time.time()) if now is None else now
        due = start_of_day(now, self.settings.DAY_START_HOUR)

        async with self.store.transaction() as session:
            await blacklist_lemma(session, target)
            result = await session.execute(
                insert(CardRecord.__table__).values(
                    native=native,
                    russian=target,
                    due=due,
                    stability=0.0,
                    difficulty=0.0,
                )
            )
            card_id = result.inserted_primary_key[0]

        log.info("card_created", card_id=card_id, target=target, due=due)
        return Card(id=card_id, native=native, target=target, due=due)

    async def due_cards(self, as_of: int) -> list[Card]:
        """Cards whose due time has come by ``as_of``, earliest first."""
        async with self.store.session() as session:
            result = await session.execute(
                select(CardRecord)
                .where(CardRecord.due <= as_of)
                .order_by(CardRecord.due, CardRecord.id)
            )
            return [_to_card(record) for record in result.scalars()]

    async def update_cards(self, cards: list[Card]) -> None:
        """Persist reviewed cards in one transaction.

        Reviews only move existing cards forward; an unknown card id rolls the
        whole batch back.
        """
        async with self.store.transaction() as session:
            for card in cards:
                result = await session.execute(
                    update(CardRecord.__table__)
                    .where(CardRecord.__table__.c.id == card.id)
                    .values(
                        native=card.native,
                        russian=card.target,
                        due=card.due,
                        stability=card.stability,
                        difficulty=card.difficulty,
                    )
                )
                if result.rowcount == 0:
                    error = invariant_violated(
                        f"card {card.id} does not exist", origin="schedule", card_id=card.id
                    ).error
                    raise AppErrorException(error)
                await blacklist_lemma(session, card.target)
        log.info("cards_updated", count=len(cards))

    async def export_cards(self, path: Path | str) -> int:
        """Write an Anki text import file (``target;native`` per line).

        Fields containing the separator, quotes or line breaks are quoted.
        """
        async with self.store.session() as session:
            result = await session.execute(
                select(CardRecord.target, CardRecord.native).order_by(CardRecord.id)
            )
            rows = result.all()

        try:
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(ANKI_HEADER)
                writer = csv.writer(f, delimiter=";", lineterminator="\n")
                writer.writerows(rows)
        except OSError as e:
            error = file_write_error(path, e.strerror or str(e), origin="export", cause=e).error
            raise AppErrorException(error) from e

        log.info("cards_exported", file_path=str(path), count=len(rows))
        return len(rows)
