"""Data Ingestion Package

Builds the lexicon from:
- Wiktextract dictionary dumps (JSONL)
- Whitespace-delimited word frequency lists
"""
from ingest.parsers.wiktextract import WiktextractParser, WordRecord
from ingest.dictionary import DictionaryImporter, ImportStats
from ingest.frequency import FrequencyIndexer, FrequencyStats

__all__ = [
    "WiktextractParser", "WordRecord",
    "DictionaryImporter", "ImportStats",
    "FrequencyIndexer", "FrequencyStats",
]
