"""Lemmatizer and Ledger Updater

Turns free text into lemma statistics:
1. Tokenize into lowercase Cyrillic word forms (optionally per sentence)
2. Resolve each form to its dictionary lemma(s) through forms.normalized_form
3. Upsert the lemmas: new rows start at the batch's count, existing rows
   only grow; first occurrences are offset past everything already stored
4. In sentence mode, keep up to SENTENCE_LIMIT distinct example sentences
   per lemma, from sentences of acceptable length

A form that resolves to several lemmas (homographs) counts for each of them.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path

from sqlalchemy import delete, func, inspect, literal_column, select, update
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.database import Store
from core.logging import ledger_logger
from languages.russian.text import normalize, split_sentences, tokenize
from models.ledger import Lemma, sentences
from models.lexicon import Form, Word, frequency

log = ledger_logger()

# Stay well below SQLite's bound-parameter limit
_IN_CHUNK = 500


@dataclass
class LemmaTally:
    count: int = 0
    first_position: int = 0


@dataclass
class LemmatizeStats:
    forms: int = 0
    resolved_forms: int = 0
    lemmas: int = 0
    sentences_added: int = 0
    offset: int = 0

    def to_dict(self) -> dict:
        return {
            "forms": self.forms,
            "resolved_forms": self.resolved_forms,
            "lemmas": self.lemmas,
            "sentences_added": self.sentences_added,
            "offset": self.offset,
        }


@dataclass
class TextBatch:
    """Tokenized text: per-form tallies plus candidate example sentences."""
    tallies: dict[str, LemmaTally] = field(default_factory=dict)
    sentences: list[tuple[str, list[str]]] = field(default_factory=list)
    forms: int = 0

    def add(self, form: str, position: int) -> None:
        tally = self.tallies.get(form)
        if tally is None:
            self.tallies[form] = LemmaTally(1, position)
        else:
            tally.count += 1


def build_batch(text: str, capture_sentences: bool, settings: Settings) -> TextBatch:
    """Tokenize text; positions run across sentences."""
    batch = TextBatch()
    if not capture_sentences:
        for position, form in enumerate(tokenize(text)):
            batch.add(form, position)
        batch.forms = sum(t.count for t in batch.tallies.values())
        return batch

    position = 0
    for sentence in split_sentences(text):
        forms = tokenize(sentence)
        for form in forms:
            batch.add(form, position)
            position += 1
        if settings.SENTENCE_MIN_FORMS <= len(forms) < settings.SENTENCE_MAX_FORMS:
            batch.sentences.append((sentence, list(dict.fromkeys(forms))))
    batch.forms = position
    return batch


def _chunks(items: list[str]):
    for i in range(0, len(items), _IN_CHUNK):
        yield items[i:i + _IN_CHUNK]


async def resolve_lemmas(session: AsyncSession, forms: list[str]) -> dict[str, list[str]]:
    """Map each form to the distinct headwords it inflects (or is)."""
    resolved: dict[str, dict[str, None]] = defaultdict(dict)
    for chunk in _chunks(forms):
        rows = await session.execute(
            select(Form.normalized_form, Word.word)
            .join(Word, Word.id == Form.word_id)
            .where(Form.normalized_form.in_(chunk))
            .order_by(Word.id)
        )
        for form, lemma in rows:
            resolved[form][lemma] = None

        rows = await session.execute(
            select(Word.word).where(Word.word.in_(chunk)).order_by(Word.id)
        )
        for (lemma,) in rows:
            resolved[lemma][lemma] = None
    return {form: list(lemmas) for form, lemmas in resolved.items()}


async def general_frequencies(session: AsyncSession, lemmas: list[str]) -> dict[str, int | None]:
    """Best corpus rank per headword; None when no word of that spelling was ranked."""
    ranks: dict[str, int | None] = {}
    for chunk in _chunks(lemmas):
        rows = await session.execute(
            select(Word.word, func.min(frequency.c.frequency))
            .select_from(Word)
            .outerjoin(frequency, frequency.c.word_id == Word.id)
            .where(Word.word.in_(chunk))
            .group_by(Word.word)
        )
        ranks.update({lemma: rank for lemma, rank in rows})
    return ranks


async def blacklist_lemma(session: AsyncSession, lemma: str) -> bool:
    """Mark a lemma as known; False when it is not in the ledger."""
    result = await session.execute(
        update(Lemma).where(Lemma.lemma == normalize(lemma)).values(blacklisted=1)
    )
    return result.rowcount > 0


def _rebuild_ledger_tables(connection, keep_blacklist: bool) -> None:
    lemmas = Lemma.__table__
    exists = inspect(connection).has_table(lemmas.name)
    sentences.drop(connection, checkfirst=True)
    if exists and keep_blacklist:
        connection.execute(delete(lemmas).where(lemmas.c.blacklisted == 0))
    else:
        lemmas.drop(connection, checkfirst=True)
        lemmas.create(connection)
    sentences.create(connection)


class Lemmatizer:
    """Updates the lemma ledger from text."""

    __slots__ = ("store", "settings")

    def __init__(self, store: Store, settings: Settings | None = None):
        self.store = store
        self.settings = settings or get_settings()

    async def lemmatize(self, text: str, capture_sentences: bool = False) -> LemmatizeStats:
        batch = build_batch(text, capture_sentences, self.settings)
        stats = LemmatizeStats(forms=batch.forms)
        if not batch.tallies:
            return stats

        async with self.store.transaction() as session:
            max_position = await session.scalar(select(func.max(Lemma.first_occurence)))
            stats.offset = 0 if max_position is None else max_position + 1

            resolved = await resolve_lemmas(session, list(batch.tallies))
            stats.resolved_forms = sum(batch.tallies[form].count for form in resolved)

            per_lemma: dict[str, LemmaTally] = {}
            for form, lemmas in resolved.items():
                tally = batch.tallies[form]
                for lemma in lemmas:
                    total = per_lemma.get(lemma)
                    if total is None:
                        per_lemma[lemma] = LemmaTally(tally.count, tally.first_position)
                    else:
                        total.count += tally.count
                        total.first_position = min(total.first_position, tally.first_position)

            if per_lemma:
                await self._upsert(session, per_lemma, stats.offset)
            stats.lemmas = len(per_lemma)

            if batch.sentences and per_lemma:
                stats.sentences_added = await self._add_sentences(session, batch, resolved)

        log.info("text_lemmatized", **stats.to_dict(), sentences=capture_sentences)
        return stats

    async def lemmatize_from_file(self, path: Path | str, capture_sentences: bool = False) -> LemmatizeStats:
        text = Path(path).read_text(encoding="utf-8")
        log.info("lemmatize_file_started", file_path=str(path), chars=len(text))
        return await self.lemmatize(text, capture_sentences)

    async def _upsert(self, session: AsyncSession, per_lemma: dict[str, LemmaTally], offset: int) -> None:
        ranks = await general_frequencies(session, list(per_lemma))
        ordered = sorted(per_lemma.items(), key=lambda item: (item[1].first_position, item[0]))
        rows = [
            {
                "lemma": lemma,
                "frequency": tally.count,
                "general_frequency": ranks.get(lemma),
                "blacklisted": 0,
                "first_occurence": offset + tally.first_position,
            }
            for lemma, tally in ordered
        ]
        table = Lemma.__table__
        stmt = sqlite_insert(table)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.lemma],
            set_={"frequency": table.c.frequency + stmt.excluded.frequency},
        )
        await session.execute(stmt, rows)

    async def _add_sentences(
        self, session: AsyncSession, batch: TextBatch, resolved: dict[str, list[str]]
    ) -> int:
        touched = list({lemma for lemmas in resolved.values() for lemma in lemmas})
        stored: dict[str, list[str]] = defaultdict(list)
        for chunk in _chunks(touched):
            rows = await session.execute(
                select(sentences.c.lemma, sentences.c.sentence).where(sentences.c.lemma.in_(chunk))
            )
            for lemma, sentence in rows:
                stored[lemma].append(sentence)

        limit = self.settings.SENTENCE_LIMIT
        new_rows = []
        for sentence, forms in batch.sentences:
            lemmas = dict.fromkeys(lemma for form in forms for lemma in resolved.get(form, ()))
            for lemma in lemmas:
                kept = stored[lemma]
                if len(kept) < limit and sentence not in kept:
                    kept.append(sentence)
                    new_rows.append({"lemma": lemma, "sentence": sentence})

        if new_rows:
            await session.execute(sentences.insert(), new_rows)
        return len(new_rows)

    async def rebuild_ledger(self, keep_blacklist: bool = False) -> None:
        async with self.store.transaction() as session:
            await session.run_sync(lambda s: _rebuild_ledger_tables(s.connection(), keep_blacklist))
        log.info("ledger_rebuilt", keep_blacklist=keep_blacklist)

    async def blacklist(self, lemma: str) -> bool:
        async with self.store.transaction() as session:
            updated = await blacklist_lemma(session, lemma)
        log.info("lemma_blacklisted", lemma=lemma, found=updated)
        return updated

    async def get_sentences(self, lemma: str) -> list[str]:
        async with self.store.session() as session:
            result = await session.execute(
                select(sentences.c.sentence)
                .where(sentences.c.lemma == normalize(lemma))
                .order_by(literal_column("rowid"))
            )
            return list(result.scalars())
