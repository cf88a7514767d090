"""Tests for linking a frequency list to lexicon words."""

from sqlalchemy import select
from structlog.testing import CapturingLogger

from core.errors import ErrorCode
from ingest import frequency as indexer_module
from ingest.frequency import iter_tokens
from models.lexicon import Word, frequency

from conftest import KNIGA, write_dump


async def ranks_by_word(store) -> dict[str, list[int]]:
    async with store.session() as session:
        rows = await session.execute(
            select(Word.word, frequency.c.frequency)
            .join(frequency, frequency.c.word_id == Word.id)
            .order_by(Word.id)
        )
        ranks: dict[str, list[int]] = {}
        for word, rank in rows:
            ranks.setdefault(word, []).append(rank)
        return ranks


class TestIterTokens:

    def test_rank_runs_across_lines(self, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("а  б\n\nв\tг\n", encoding="utf-8")
        assert list(iter_tokens(path)) == [(0, "а"), (1, "б"), (2, "в"), (3, "г")]


class TestFrequencyImport:

    async def test_rank_is_stream_position(self, lexicon_service, store):
        assert await ranks_by_word(store) == {
            "дом": [3],
            "книга": [2],
            "читать": [4],
            "стекло": [6],
        }

    async def test_stats(self, service, dump_path, frequency_path):
        await service.import_dictionary(dump_path)
        stats = (await service.import_frequency(frequency_path)).unwrap()
        assert stats.tokens == 7
        assert stats.matched_tokens == 4
        assert stats.rows == 4

    async def test_homographs_share_rank(self, service, store, tmp_path):
        key_lock = {"word": "ключ", "pos": "noun", "senses": [{"glosses": ["key"]}]}
        key_spring = {"word": "ключ", "pos": "noun", "senses": [{"glosses": ["spring"]}]}
        await service.import_dictionary(write_dump(tmp_path / "d.jsonl", [key_lock, key_spring]))
        path = tmp_path / "f.txt"
        path.write_text("вода ключ", encoding="utf-8")

        stats = (await service.import_frequency(path)).unwrap()

        assert stats.rows == 2
        assert await ranks_by_word(store) == {"ключ": [1, 1]}

    async def test_reimport_replaces_ranks(self, lexicon_service, store, tmp_path):
        path = tmp_path / "f.txt"
        path.write_text("книга", encoding="utf-8")

        assert (await lexicon_service.import_frequency(path)).is_ok()

        assert await ranks_by_word(store) == {"книга": [0]}

    async def test_without_lexicon(self, service, store, frequency_path):
        stats = (await service.import_frequency(frequency_path)).unwrap()
        assert stats.rows == 0

    async def test_dictionary_reimport_clears_ranks(self, lexicon_service, store, tmp_path):
        await lexicon_service.import_dictionary(write_dump(tmp_path / "d.jsonl", [KNIGA]))
        assert await ranks_by_word(store) == {}

    async def test_missing_file_keeps_previous_ranks(self, lexicon_service, store, tmp_path):
        error = (await lexicon_service.import_frequency(tmp_path / "absent.txt")).unwrap_err()
        assert error.code == ErrorCode.E6001_FILE_NOT_FOUND
        assert (await ranks_by_word(store))["книга"] == [2]

    async def test_failure_logged(self, service, monkeypatch, tmp_path):
        capture = CapturingLogger()
        monkeypatch.setattr(indexer_module, "log", capture)

        await service.import_frequency(tmp_path / "absent.txt")

        [failed] = [c for c in capture.calls if c.args == ("frequency_import_failed",)]
        assert failed.method_name == "error"
        assert failed.kwargs["file_path"] == str(tmp_path / "absent.txt")
