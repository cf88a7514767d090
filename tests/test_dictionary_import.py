"""Tests for the dictionary importer and lexicon lookup."""

import json

from sqlalchemy import func, select
from structlog.testing import CapturingLogger

from core.errors import ErrorCode
from ingest.parsers import wiktextract
from models.lexicon import Form, Pronunciation, Synonym, Word, form_tags, sense_synonyms

from conftest import DOM, KNIGA, SAMPLE_RECORDS, write_dump


async def count(store, table) -> int:
    async with store.session() as session:
        return await session.scalar(select(func.count()).select_from(table))


class TestImport:

    async def test_stats(self, service, dump_path):
        stats = (await service.import_dictionary(dump_path)).unwrap()
        assert stats.words == 5
        assert stats.records_skipped == 2
        assert stats.lines_read == len(SAMPLE_RECORDS)
        assert stats.completed_at is not None

    async def test_pos_outside_closed_set_creates_no_word(self, service, store, dump_path):
        await service.import_dictionary(dump_path)
        assert (await service.lookup_entries("Москва")).unwrap() == []
        async with store.session() as session:
            pos = set((await session.execute(select(Word.pos))).scalars())
        assert pos == {"noun", "verb"}

    async def test_record_with_only_form_of_senses_skipped(self, service, dump_path):
        await service.import_dictionary(dump_path)
        assert (await service.lookup_entries("дома")).unwrap() == []

    async def test_reimport_replaces_lexicon(self, service, store, dump_path, tmp_path):
        await service.import_dictionary(dump_path)
        second = write_dump(tmp_path / "second.jsonl", [KNIGA])
        assert (await service.import_dictionary(second)).is_ok()
        assert await count(store, Word) == 1
        assert (await service.lookup_entries("дом")).unwrap() == []


class TestLookup:

    async def test_round_trip(self, service, dump_path):
        await service.import_dictionary(dump_path)
        entries = (await service.lookup_entries("дом")).unwrap()
        assert len(entries) == 1
        entry = entries[0]
        assert entry.pos == "noun"
        assert entry.etymology == "From Proto-Slavic *domъ."
        assert entry.expansion == "дом • (dom) m inan"

    async def test_senses_ordered_by_relevance_without_form_of(self, service, dump_path):
        await service.import_dictionary(dump_path)
        entry = (await service.lookup_entries("дом")).unwrap()[0]
        assert [s.sense for s in entry.senses] == ["house", "home", "household"]
        assert [s.relevance for s in entry.senses] == [0, 1, 3]

    async def test_sense_details(self, service, dump_path):
        await service.import_dictionary(dump_path)
        first, second, third = (await service.lookup_entries("дом")).unwrap()[0].senses
        assert first.tags == ["inanimate"]
        assert first.examples[0].text == "Мой дом."
        assert first.examples[0].english == "My house."
        assert second.examples[0].english is None
        assert first.synonyms == ["здание"]
        assert third.synonyms == ["хозяйство", "здание"]

    async def test_forms_filtered_and_normalized(self, service, store, dump_path):
        await service.import_dictionary(dump_path)
        entry = (await service.lookup_entries("дом")).unwrap()[0]
        assert [f.form for f in entry.forms] == ["до́ма", "дома́"]
        assert entry.forms[0].tags == ["genitive", "singular"]
        async with store.session() as session:
            normalized = (await session.execute(
                select(Form.normalized_form).order_by(Form.id)
            )).scalars().all()
        assert "дома" in normalized
        assert "ru-noun-table" not in normalized
        assert "impf" not in normalized

    async def test_excluded_form_tags_never_stored(self, service, store, dump_path):
        await service.import_dictionary(dump_path)
        async with store.session() as session:
            tags = set((await session.execute(select(form_tags.c.tag))).scalars())
        assert not tags & {"inflection-template", "table-tags", "class"}

    async def test_pronunciations_need_ipa(self, service, store, dump_path):
        await service.import_dictionary(dump_path)
        entry = (await service.lookup_entries("дом")).unwrap()[0]
        assert [(p.ipa, p.tags) for p in entry.pronunciations] == [("[dom]", ["Moscow"])]
        assert await count(store, Pronunciation) == 1

    async def test_synonyms_reused(self, service, store, dump_path):
        await service.import_dictionary(dump_path)
        assert await count(store, Synonym) == 2
        assert await count(store, sense_synonyms) == 3

    async def test_missing_word(self, service, dump_path):
        await service.import_dictionary(dump_path)
        assert (await service.lookup_entries("кошка")).unwrap() == []

    async def test_entry_serializes(self, service, dump_path):
        await service.import_dictionary(dump_path)
        entry = (await service.lookup_entries("книга")).unwrap()[0]
        data = entry.to_dict()
        assert data["word"] == "книга"
        assert data["senses"][0]["sense"] == "book"
        assert len(data["forms"]) == 3


class TestImportFailures:

    async def test_malformed_line_rolls_back(self, service, store, tmp_path):
        records = [
            {"word": f"слово{i}", "pos": "noun", "senses": [{"glosses": ["word"]}]}
            for i in range(499)
        ]
        path = write_dump(tmp_path / "broken.jsonl", [*records, "{not json"])

        result = await service.import_dictionary(path)

        assert result.is_err()
        error = result.unwrap_err()
        assert error.code == ErrorCode.E2021_INVALID_JSON
        assert error.metadata["line"] == 500
        assert "line 500" in error.message
        assert await count(store, Word) == 0

    async def test_failed_import_keeps_previous_lexicon(self, service, store, dump_path, tmp_path):
        await service.import_dictionary(dump_path)
        path = write_dump(tmp_path / "broken.jsonl", [KNIGA, "[1, 2"])

        assert (await service.import_dictionary(path)).is_err()

        assert await count(store, Word) == 5
        assert len((await service.lookup_entries("дом")).unwrap()) == 1

    async def test_missing_field(self, service, tmp_path):
        path = write_dump(tmp_path / "d.jsonl", [{"word": "кот", "pos": "noun"}])
        error = (await service.import_dictionary(path)).unwrap_err()
        assert error.code == ErrorCode.E2001_REQUIRED_FIELD_MISSING
        assert error.metadata["field"] == "senses"
        assert error.metadata["line"] == 1

    async def test_wrong_type(self, service, tmp_path):
        record = {**DOM, "senses": [{"glosses": [42]}]}
        path = write_dump(tmp_path / "d.jsonl", [KNIGA, record])
        error = (await service.import_dictionary(path)).unwrap_err()
        assert error.code == ErrorCode.E2004_INVALID_TYPE
        assert error.metadata["field"] == "senses.0.glosses.0"
        assert error.metadata["line"] == 2
        assert error.metadata["fragment"] == "42"

    async def test_empty_array(self, service, tmp_path):
        record = {**KNIGA, "head_templates": []}
        path = write_dump(tmp_path / "d.jsonl", [record])
        error = (await service.import_dictionary(path)).unwrap_err()
        assert error.code == ErrorCode.E2006_EMPTY_ARRAY
        assert error.metadata["field"] == "head_templates"

    async def test_shape_errors_ignored_for_skipped_records(self, service, tmp_path):
        record = {"word": "Москва", "pos": "name", "senses": "not a list"}
        path = write_dump(tmp_path / "d.jsonl", [record, KNIGA])
        stats = (await service.import_dictionary(path)).unwrap()
        assert stats.words == 1

    async def test_missing_file(self, service, tmp_path):
        error = (await service.import_dictionary(tmp_path / "absent.jsonl")).unwrap_err()
        assert error.code == ErrorCode.E6001_FILE_NOT_FOUND
        assert error.context.origin == "dictionary_import"

    async def test_blank_lines_ignored(self, service, tmp_path):
        path = tmp_path / "d.jsonl"
        path.write_text("\n" + json.dumps(KNIGA, ensure_ascii=False) + "\n\n", encoding="utf-8")
        stats = (await service.import_dictionary(path)).unwrap()
        assert stats.words == 1


class TestProgress:

    def test_progress_counts_skipped_lines(self, monkeypatch, tmp_path):
        capture = CapturingLogger()
        monkeypatch.setattr(wiktextract, "log", capture)
        names = [{"word": f"Город{i}", "pos": "name", "senses": []} for i in range(5)]
        path = write_dump(tmp_path / "d.jsonl", names)

        parser = wiktextract.WiktextractParser(progress_every=2)
        assert list(parser.parse_file(path)) == []

        progress = [c.kwargs for c in capture.calls if c.args == ("dictionary_import_progress",)]
        assert progress == [{"lines": 2, "skipped": 1}, {"lines": 4, "skipped": 3}]
        assert parser.skipped == 5
