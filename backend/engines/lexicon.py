"""Lexicon lookup: the denormalized dictionary view of a headword."""
from collections import defaultdict
from dataclasses import asdict, dataclass, field

from sqlalchemy import literal_column, select
from sqlalchemy.orm import selectinload

from core.database import Store
from models.lexicon import (
    Synonym,
    Word,
    examples,
    form_tags,
    pronunciation_tags,
    sense_synonyms,
    sense_tags,
)


@dataclass(slots=True)
class EntryExample:
    text: str
    english: str | None = None


@dataclass(slots=True)
class EntrySense:
    sense: str | None
    relevance: int
    examples: list[EntryExample] = field(default_factory=list)
    synonyms: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True)
class EntryForm:
    form: str
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True)
class EntryPronunciation:
    ipa: str
    tags: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Entry:
    """One dictionary word with everything attached to it."""
    word: str
    pos: str
    etymology: str | None = None
    expansion: str | None = None
    senses: list[EntrySense] = field(default_factory=list)
    forms: list[EntryForm] = field(default_factory=list)
    pronunciations: list[EntryPronunciation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


class LexiconReader:
    """Read side of the lexicon."""

    __slots__ = ("store",)

    def __init__(self, store: Store):
        self.store = store

    async def lookup_entries(self, word: str) -> list[Entry]:
        """All words spelled ``word``, senses ordered by relevance."""
        async with self.store.session() as session:
            result = await session.execute(
                select(Word)
                .where(Word.word == word)
                .options(
                    selectinload(Word.senses),
                    selectinload(Word.forms),
                    selectinload(Word.pronunciations),
                )
                .order_by(Word.id)
            )
            words = result.scalars().all()

            sense_ids = [s.id for w in words for s in w.senses]
            form_ids = [f.id for w in words for f in w.forms]
            pronunciation_ids = [p.id for w in words for p in w.pronunciations]

            tags_by_sense = await self._grouped(session, sense_tags.c.sense_id, sense_tags.c.tag, sense_ids)
            tags_by_form = await self._grouped(session, form_tags.c.form_id, form_tags.c.tag, form_ids)
            tags_by_pronunciation = await self._grouped(
                session, pronunciation_tags.c.pronunciation_id, pronunciation_tags.c.tag, pronunciation_ids
            )

            examples_by_sense: dict[int, list[EntryExample]] = defaultdict(list)
            synonyms_by_sense: dict[int, list[str]] = defaultdict(list)
            if sense_ids:
                rows = await session.execute(
                    select(examples.c.sense_id, examples.c.text, examples.c.english)
                    .where(examples.c.sense_id.in_(sense_ids))
                    .order_by(literal_column("examples.rowid"))
                )
                for sense_id, text, english in rows:
                    examples_by_sense[sense_id].append(EntryExample(text, english))

                rows = await session.execute(
                    select(sense_synonyms.c.sense_id, Synonym.synonym)
                    .join(Synonym, Synonym.id == sense_synonyms.c.synonym_id)
                    .where(sense_synonyms.c.sense_id.in_(sense_ids))
                    .order_by(literal_column("sense_synonyms.rowid"))
                )
                for sense_id, synonym in rows:
                    synonyms_by_sense[sense_id].append(synonym)

        return [
            Entry(
                word=w.word,
                pos=w.pos,
                etymology=w.etymology,
                expansion=w.expansion,
                senses=[
                    EntrySense(
                        sense=s.sense,
                        relevance=s.relevance,
                        examples=examples_by_sense.get(s.id, []),
                        synonyms=synonyms_by_sense.get(s.id, []),
                        tags=tags_by_sense.get(s.id, []),
                    )
                    for s in w.senses
                ],
                forms=[EntryForm(f.form, tags_by_form.get(f.id, [])) for f in w.forms],
                pronunciations=[
                    EntryPronunciation(p.ipa, tags_by_pronunciation.get(p.id, []))
                    for p in w.pronunciations
                ],
            )
            for w in words
        ]

    @staticmethod
    async def _grouped(session, key_column, value_column, keys: list[int]) -> dict[int, list[str]]:
        grouped: dict[int, list[str]] = defaultdict(list)
        if keys:
            rows = await session.execute(
                select(key_column, value_column)
                .where(key_column.in_(keys))
                .order_by(literal_column(f"{key_column.table.name}.rowid"))
            )
            for key, value in rows:
                grouped[key].append(value)
        return grouped
