"""Tests for card persistence and export."""

from dataclasses import replace

from sqlalchemy import select

from core.errors import ErrorCode
from engines.fsrs import SECONDS_PER_DAY, Grade
from engines.schedule import ANKI_HEADER
from models.ledger import Lemma

DAY = 19_675 * SECONDS_PER_DAY
NOW = DAY + 12 * 3600
DUE = DAY + 5 * 3600


async def blacklisted(store, lemma: str) -> int | None:
    async with store.session() as session:
        return await session.scalar(select(Lemma.blacklisted).where(Lemma.lemma == lemma))


class TestInsertCard:

    async def test_new_card_due_at_start_of_day(self, service):
        card = (await service.insert_card("book", "книга", now=NOW)).unwrap()
        assert card.due == DUE
        assert card.is_new
        assert card.difficulty == 0.0
        assert card.id > 0

    async def test_blacklists_target(self, lexicon_service, store):
        await lexicon_service.lemmatize("Я читаю книгу.")
        assert await blacklisted(store, "книга") == 0

        await lexicon_service.insert_card("book", "книга", now=NOW)

        assert await blacklisted(store, "книга") == 1

    async def test_target_outside_ledger(self, service):
        assert (await service.insert_card("cat", "кошка", now=NOW)).is_ok()

    async def test_new_card_immediately_due(self, service):
        card = (await service.insert_card("book", "книга", now=NOW)).unwrap()
        assert (await service.due_cards(NOW)).unwrap() == [card]


class TestDueCards:

    async def test_boundary(self, service):
        card = (await service.insert_card("book", "книга", now=NOW)).unwrap()
        assert (await service.due_cards(DUE)).unwrap() == [card]
        assert (await service.due_cards(DUE - 1)).unwrap() == []

    async def test_ordered_by_due(self, service):
        later = (await service.insert_card("house", "дом", now=NOW + SECONDS_PER_DAY)).unwrap()
        earlier = (await service.insert_card("book", "книга", now=NOW)).unwrap()
        due = (await service.due_cards(NOW + 2 * SECONDS_PER_DAY)).unwrap()
        assert [c.id for c in due] == [earlier.id, later.id]

    async def test_empty(self, service):
        assert (await service.due_cards(NOW)).unwrap() == []


class TestUpdateCards:

    async def test_review_persisted(self, service):
        card = (await service.insert_card("book", "книга", now=NOW)).unwrap()
        reviewed = service.review_card(card, Grade.GOOD, NOW)

        assert (await service.update_cards([reviewed])).is_ok()

        assert (await service.due_cards(NOW)).unwrap() == []
        stored = (await service.due_cards(reviewed.due)).unwrap()
        assert stored == [reviewed]
        assert stored[0].stability == reviewed.stability

    async def test_blacklists_target(self, lexicon_service, store):
        card = (await lexicon_service.insert_card("house", "дом", now=NOW)).unwrap()
        await lexicon_service.lemmatize("Он дома.")
        assert await blacklisted(store, "дом") == 0

        await lexicon_service.update_cards([replace(card, native="home")])

        assert await blacklisted(store, "дом") == 1

    async def test_unknown_card_rolls_back_batch(self, service):
        book = (await service.insert_card("book", "книга", now=NOW)).unwrap()
        reviewed = service.review_card(book, Grade.GOOD, NOW)

        result = await service.update_cards([reviewed, replace(book, id=book.id + 100)])

        assert result.is_err()
        assert result.unwrap_err().code == ErrorCode.E5004_INVARIANT_VIOLATED
        assert (await service.due_cards(NOW)).unwrap() == [book]


class TestExport:

    async def test_anki_file(self, service, tmp_path):
        await service.insert_card("book", "книга", now=NOW)
        await service.insert_card("house", "дом", now=NOW)
        path = tmp_path / "anki.txt"

        assert (await service.export_cards(path)).unwrap() == 2

        assert path.read_text(encoding="utf-8") == ANKI_HEADER + "книга;book\nдом;house\n"

    async def test_empty_schedule(self, service, tmp_path):
        path = tmp_path / "anki.txt"
        assert (await service.export_cards(path)).unwrap() == 0
        assert path.read_text(encoding="utf-8") == "#separator:Semicolon\n#html:false\n"

    async def test_separator_in_field_quoted(self, service, tmp_path):
        await service.insert_card("book; volume", "книга", now=NOW)
        path = tmp_path / "anki.txt"

        await service.export_cards(path)

        assert path.read_text(encoding="utf-8") == ANKI_HEADER + 'книга;"book; volume"\n'

    async def test_line_break_in_field_quoted(self, service, tmp_path):
        await service.insert_card("house\nhome", "дом", now=NOW)
        path = tmp_path / "anki.txt"

        await service.export_cards(path)

        assert path.read_text(encoding="utf-8") == ANKI_HEADER + 'дом;"house\nhome"\n'

    async def test_unwritable_path(self, service, tmp_path):
        await service.insert_card("book", "книга", now=NOW)

        result = await service.export_cards(tmp_path)

        assert result.is_err()
        error = result.unwrap_err()
        assert error.code == ErrorCode.E6003_FILE_WRITE_ERROR
        assert error.context.origin == "export"


class TestRebuildSchedule:

    async def test_removes_cards(self, service):
        await service.insert_card("book", "книга", now=NOW)
        assert (await service.rebuild_schedule()).is_ok()
        assert (await service.due_cards(NOW + SECONDS_PER_DAY)).unwrap() == []

    async def test_ids_restart(self, service):
        await service.insert_card("book", "книга", now=NOW)
        await service.rebuild_schedule()
        card = (await service.insert_card("house", "дом", now=NOW)).unwrap()
        assert card.id == 1
