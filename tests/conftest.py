"""Shared test fixtures for the vocabulary backend."""

import json

import pytest

from core.config import Settings
from core.database import Store
from engines.service import VocabularyService


DOM = {
    "word": "дом",
    "pos": "noun",
    "etymology_text": "From Proto-Slavic *domъ.",
    "head_templates": [{"name": "ru-noun+", "expansion": "дом • (dom) m inan"}],
    "senses": [
        {
            "glosses": ["house", "building"],
            "tags": ["inanimate"],
            "examples": [{"text": "Мой дом.", "english": "My house."}],
            "synonyms": [{"word": "здание"}],
        },
        {"glosses": ["home"], "examples": [{"text": "Я дома."}]},
        {"form_of": [{"word": "дома"}], "glosses": ["inflection of дом"]},
        {"glosses": ["household"], "synonyms": [{"word": "хозяйство"}, {"word": "здание"}]},
    ],
    "forms": [
        {"form": "до́ма", "source": "declension", "tags": ["genitive", "singular"]},
        {"form": "дома́", "source": "declension", "tags": ["nominative", "plural"]},
        {"form": "ru-noun-table", "source": "declension", "tags": ["inflection-template"]},
        {"form": "до́мик", "tags": ["diminutive"]},
    ],
    "sounds": [{"ipa": "[dom]", "tags": ["Moscow"]}, {"audio": "Ru-дом.ogg"}],
}

KNIGA = {
    "word": "книга",
    "pos": "noun",
    "senses": [{"glosses": ["book"]}],
    "forms": [
        {"form": "кни́гу", "source": "declension", "tags": ["accusative", "singular"]},
        {"form": "кни́ги", "source": "declension", "tags": ["genitive", "singular"]},
        {"form": "кни́ги", "source": "declension", "tags": ["nominative", "plural"]},
    ],
}

CHITAT = {
    "word": "читать",
    "pos": "verb",
    "senses": [{"glosses": ["to read"]}],
    "forms": [
        {"form": "чита́ю", "source": "conjugation", "tags": ["first-person", "singular", "present"]},
        {"form": "чита́ет", "source": "conjugation", "tags": ["third-person", "singular", "present"]},
        {"form": "impf", "source": "conjugation", "tags": ["class"]},
    ],
}

# Homographs: the form "стекла" belongs to both lemmas
STEKLO = {
    "word": "стекло",
    "pos": "noun",
    "senses": [{"glosses": ["glass"]}],
    "forms": [{"form": "стекла́", "source": "declension", "tags": ["genitive", "singular"]}],
}

STECH = {
    "word": "стечь",
    "pos": "verb",
    "senses": [{"glosses": ["to flow down"]}],
    "forms": [{"form": "стекла́", "source": "conjugation", "tags": ["past", "feminine", "singular"]}],
}

# Not imported: part of speech outside the closed set
MOSKVA = {"word": "Москва", "pos": "name", "senses": [{"glosses": ["Moscow"]}]}

# Not imported: every sense is a form-of reference
DOMA = {
    "word": "дома",
    "pos": "noun",
    "senses": [
        {"form_of": [{"word": "дом"}], "glosses": ["genitive singular of дом"]},
        {"tags": ["form-of", "plural"], "glosses": ["nominative plural of дом"]},
    ],
}

SAMPLE_RECORDS = [DOM, KNIGA, CHITAT, STEKLO, STECH, MOSKVA, DOMA]

# Rank = position: книга 2, дом 3, читать 4, стекло 6
SAMPLE_FREQUENCY = "и в книга\nдом читать не стекло\n"


def write_dump(path, records) -> str:
    """Write records as a JSONL dump; strings are written verbatim."""
    with open(path, "w", encoding="utf-8") as f:
        for record in records:
            line = record if isinstance(record, str) else json.dumps(record, ensure_ascii=False)
            f.write(line + "\n")
    return str(path)


@pytest.fixture
def settings():
    return Settings(_env_file=None)


@pytest.fixture
async def store(tmp_path):
    """Initialized store on a temporary database file."""
    store = Store(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await store.init()
    yield store
    await store.dispose()


@pytest.fixture
def service(store, settings):
    return VocabularyService(store, settings)


@pytest.fixture
def dump_path(tmp_path):
    return write_dump(tmp_path / "dump.jsonl", SAMPLE_RECORDS)


@pytest.fixture
def frequency_path(tmp_path):
    path = tmp_path / "frequency.txt"
    path.write_text(SAMPLE_FREQUENCY, encoding="utf-8")
    return str(path)


@pytest.fixture
async def lexicon_service(service, dump_path, frequency_path):
    """Service with the sample dictionary and frequency list imported."""
    service_result = await service.import_dictionary(dump_path)
    assert service_result.is_ok(), service_result
    frequency_result = await service.import_frequency(frequency_path)
    assert frequency_result.is_ok(), frequency_result
    return service
