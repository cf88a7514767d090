"""Wiktextract JSONL Dump Parser

Decodes one dictionary record per line into typed records:
- Word header (word, pos, etymology, head template expansion)
- Senses with glosses, tags, examples and synonyms
- Inflected forms with their source table and tags
- Pronunciations (IPA) with tags

Shape problems (missing field, wrong JSON type, empty array, malformed
JSON) are raised as AppErrorException carrying the 1-based line number,
so a damaged dump aborts the import that is reading it.
"""
import json
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.errors import AppErrorException, RecordErrorMapper, invalid_json
from core.logging import ingest_logger
from languages.russian.maps import (
    EXCLUDED_FORM_TAGS,
    FORM_OF_TAG,
    FORM_SOURCES,
    WordClass,
)

log = ingest_logger()

_ORIGIN = "dictionary_import"
_mapper = RecordErrorMapper(_ORIGIN)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class ExampleRecord(_Record):
    text: str
    english: str | None = None


class SynonymRecord(_Record):
    word: str


class SenseRecord(_Record):
    form_of: list | None = None
    tags: list[str] = Field(default_factory=list)
    glosses: list[str] | None = Field(default=None, min_length=1)
    examples: list[ExampleRecord] = Field(default_factory=list)
    synonyms: list[SynonymRecord] = Field(default_factory=list)

    @property
    def is_form_of(self) -> bool:
        """Inflectional cross-reference rather than an independent meaning."""
        return self.form_of is not None or FORM_OF_TAG in self.tags

    @property
    def gloss(self) -> str | None:
        return self.glosses[0] if self.glosses else None


class FormRecord(_Record):
    form: str
    source: str | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def is_inflection(self) -> bool:
        """From a declension/conjugation table and not a template artifact."""
        return self.source in FORM_SOURCES and EXCLUDED_FORM_TAGS.isdisjoint(self.tags)


class SoundRecord(_Record):
    ipa: str | None = None
    tags: list[str] = Field(default_factory=list)


class HeadTemplateRecord(_Record):
    expansion: str | None = None


class RecordHeader(_Record):
    """Fields needed to decide whether a record applies at all."""
    word: str
    pos: str
    etymology_text: str | None = None


class WordRecord(RecordHeader):
    """Full dictionary record for a word with a qualifying part of speech."""
    head_templates: list[HeadTemplateRecord] | None = Field(default=None, min_length=1)
    senses: list[SenseRecord]
    forms: list[FormRecord] = Field(default_factory=list)
    sounds: list[SoundRecord] = Field(default_factory=list)

    @property
    def expansion(self) -> str | None:
        return self.head_templates[0].expansion if self.head_templates else None

    def kept_senses(self) -> list[tuple[int, SenseRecord]]:
        """Non form-of senses with their original position (relevance)."""
        return [(i, sense) for i, sense in enumerate(self.senses) if not sense.is_form_of]

    def kept_forms(self) -> list[FormRecord]:
        return [form for form in self.forms if form.is_inflection]


def parse_record(line: str, line_no: int) -> WordRecord | None:
    """Decode one dump line.

    Returns None for records that do not apply (part of speech outside the
    closed set). Raises AppErrorException for malformed lines.
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        error = invalid_json(e.msg, line=line_no, fragment=line[:200], origin=_ORIGIN).error
        raise AppErrorException(error) from e

    try:
        header = RecordHeader.model_validate(data)
        if header.pos not in WordClass.codes():
            return None
        return WordRecord.model_validate(data)
    except ValidationError as e:
        raise AppErrorException(_mapper.map_validation_error(e, line=line_no)) from e


def iter_lines(path: Path | str) -> Iterator[tuple[int, str]]:
    """Yield (line number, line) for every non-blank line, 1-based."""
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            if line.strip():
                yield line_no, line


class WiktextractParser:
    """Streams qualifying records from a wiktextract JSONL dump.

    Progress is logged every ``progress_every`` lines, counting skipped
    records too.
    """

    __slots__ = ("lines", "skipped", "progress_every")

    def __init__(self, progress_every: int = 10_000):
        self.lines = 0
        self.skipped = 0
        self.progress_every = progress_every

    def parse_file(self, path: Path | str) -> Iterator[tuple[int, WordRecord]]:
        next_report = self.progress_every
        for line_no, line in iter_lines(path):
            self.lines = line_no
            if line_no >= next_report:
                log.info("dictionary_import_progress", lines=line_no, skipped=self.skipped)
                next_report += self.progress_every

            record = parse_record(line, line_no)
            if record is None:
                self.skipped += 1
                continue
            yield line_no, record
