"""Study Queue Ranker

Orders the non-blacklisted lemmas of the ledger into "what to learn next".
Each enabled signal ranks every eligible lemma (1 = best):

- by_frequency: most often seen in the learner's own text first
- by_general_frequency: most common in the reference corpus first
  (lemmas without a corpus rank go last)
- by_first_occurence: met earliest first; its rank is weighted by 1.5 so
  reading order counts for less than the two frequency signals

With one signal the queue follows its rank. With several, a lemma's best
(smallest) rank decides, then the median rank when all three are enabled,
then its worst (largest) rank. Remaining ties keep ledger storage order.
"""
from dataclasses import dataclass

from sqlalchemy import exists, literal_column, select

from core.config import Settings, get_settings
from core.database import Store
from core.logging import queue_logger
from languages.russian.maps import WordClass
from models.ledger import Lemma
from models.lexicon import Word

log = queue_logger()

FIRST_OCCURENCE_WEIGHT = 1.5


@dataclass(frozen=True, slots=True)
class QueueSignals:
    by_frequency: bool = False
    by_general_frequency: bool = False
    by_first_occurence: bool = False

    @property
    def enabled(self) -> int:
        return self.by_frequency + self.by_general_frequency + self.by_first_occurence


@dataclass(frozen=True, slots=True)
class SignalRanks:
    """Row numbers of one lemma under each enabled signal (None = disabled)."""
    frequency: int | None = None
    general_frequency: int | None = None
    first_occurence: int | None = None

    def weighted(self) -> list[float]:
        values: list[float] = []
        if self.frequency is not None:
            values.append(self.frequency)
        if self.general_frequency is not None:
            values.append(self.general_frequency)
        if self.first_occurence is not None:
            values.append(FIRST_OCCURENCE_WEIGHT * self.first_occurence)
        return values


def merge_key(ranks: SignalRanks) -> tuple[float, ...]:
    """Sort key merging the enabled signal ranks."""
    values = ranks.weighted()
    if not values:
        return ()
    if len(values) == 1:
        return (values[0],)

    smallest = min(values)
    largest = max(values)
    if len(values) == 3:
        median = next((v for v in values if smallest < v < largest), largest)
        return (smallest, median, largest)
    return (smallest, largest)


@dataclass(frozen=True, slots=True)
class LedgerRow:
    rowid: int
    lemma: str
    frequency: int
    general_frequency: int | None
    first_occurence: int


def _row_numbers(rows: list[LedgerRow], key) -> dict[str, int]:
    ordered = sorted(rows, key=lambda row: (key(row), row.rowid))
    return {row.lemma: number for number, row in enumerate(ordered, start=1)}


def rank_lemmas(rows: list[LedgerRow], signals: QueueSignals) -> list[str]:
    """Full queue order for the given rows (expected in storage order)."""
    by_frequency = _row_numbers(rows, lambda r: -r.frequency) if signals.by_frequency else {}
    by_general = (
        _row_numbers(rows, lambda r: (r.general_frequency is None, r.general_frequency or 0))
        if signals.by_general_frequency else {}
    )
    by_first = _row_numbers(rows, lambda r: r.first_occurence) if signals.by_first_occurence else {}

    def key(row: LedgerRow):
        ranks = SignalRanks(
            frequency=by_frequency.get(row.lemma),
            general_frequency=by_general.get(row.lemma),
            first_occurence=by_first.get(row.lemma),
        )
        return merge_key(ranks), row.rowid

    return [row.lemma for row in sorted(rows, key=key)]


class QueueRanker:
    """Paginated access to the ranked queue."""

    __slots__ = ("store", "page_size")

    def __init__(self, store: Store, settings: Settings | None = None):
        self.store = store
        self.page_size = (settings or get_settings()).QUEUE_PAGE_SIZE

    async def next_page(
        self,
        offset: int,
        signals: QueueSignals,
        pos_filter: set[WordClass] | frozenset[WordClass] = frozenset(),
    ) -> list[str]:
        rowid = literal_column("lemmas.rowid")
        stmt = select(
            rowid,
            Lemma.lemma,
            Lemma.frequency,
            Lemma.general_frequency,
            Lemma.first_occurence,
        ).where(Lemma.blacklisted == 0)
        if pos_filter:
            codes = sorted(WordClass(c).value for c in pos_filter)
            stmt = stmt.where(
                exists().where(Word.word == Lemma.lemma, Word.pos.in_(codes))
            )
        stmt = stmt.order_by(rowid)

        if not signals.enabled:
            async with self.store.session() as session:
                result = await session.execute(stmt.limit(self.page_size).offset(offset))
                return [row.lemma for row in result]

        async with self.store.session() as session:
            result = await session.execute(stmt)
            rows = [LedgerRow(*row) for row in result]

        queue = rank_lemmas(rows, signals)
        page = queue[offset:offset + self.page_size]
        log.debug(
            "queue_page_ranked",
            offset=offset,
            eligible=len(rows),
            returned=len(page),
            signals=signals.enabled,
        )
        return page
