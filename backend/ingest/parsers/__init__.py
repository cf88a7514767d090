"""Parser implementations for dictionary dump formats."""
from ingest.parsers.wiktextract import (
    WiktextractParser, WordRecord, SenseRecord, FormRecord, SoundRecord, parse_record,
)

__all__ = [
    "WiktextractParser", "WordRecord", "SenseRecord", "FormRecord", "SoundRecord", "parse_record",
]
