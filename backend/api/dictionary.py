"""Dictionary API Routes

Lexicon rebuilds from dump files and headword lookup.
"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_service
from core.errors.handlers import raise_result
from core.logging import api_logger
from engines.service import VocabularyService

log = api_logger()

router = APIRouter()


class ImportRequest(BaseModel):
    path: str


class ExampleResponse(BaseModel):
    text: str
    english: str | None = None

    class Config:
        from_attributes = True


class SenseResponse(BaseModel):
    sense: str | None
    relevance: int
    examples: list[ExampleResponse]
    synonyms: list[str]
    tags: list[str]

    class Config:
        from_attributes = True


class FormResponse(BaseModel):
    form: str
    tags: list[str]

    class Config:
        from_attributes = True


class PronunciationResponse(BaseModel):
    ipa: str
    tags: list[str]

    class Config:
        from_attributes = True


class EntryResponse(BaseModel):
    word: str
    pos: str
    etymology: str | None
    expansion: str | None
    senses: list[SenseResponse]
    forms: list[FormResponse]
    pronunciations: list[PronunciationResponse]

    class Config:
        from_attributes = True


@router.post("/import")
async def import_dictionary(body: ImportRequest, service: VocabularyService = Depends(get_service)):
    """Rebuild the lexicon from a wiktextract JSONL dump (runs to completion)."""
    log.info("dictionary_import_requested", file_path=body.path)
    stats = raise_result(await service.import_dictionary(body.path))
    return stats.to_dict()


@router.post("/frequency")
async def import_frequency(body: ImportRequest, service: VocabularyService = Depends(get_service)):
    """Rebuild corpus ranks from a whitespace-delimited frequency list."""
    stats = raise_result(await service.import_frequency(body.path))
    return stats.to_dict()


@router.get("/entries/{word}", response_model=list[EntryResponse])
async def lookup_entries(word: str, service: VocabularyService = Depends(get_service)):
    return raise_result(await service.lookup_entries(word))
