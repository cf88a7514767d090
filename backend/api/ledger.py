"""Ledger API Routes

Lemmatization of learner text, the ranked study queue, blacklisting and
example sentences.
"""
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from api.deps import get_service
from core.errors.handlers import raise_result
from engines.queue import QueueSignals
from engines.service import VocabularyService
from languages.russian.maps import WordClass

router = APIRouter()


class LemmatizeRequest(BaseModel):
    text: str
    capture_sentences: bool = False


class LemmatizeFileRequest(BaseModel):
    path: str
    capture_sentences: bool = False


class RebuildRequest(BaseModel):
    keep_blacklist: bool = False


class BlacklistRequest(BaseModel):
    lemma: str


class QueueResponse(BaseModel):
    offset: int
    lemmas: list[str]


@router.post("/lemmatize")
async def lemmatize(body: LemmatizeRequest, service: VocabularyService = Depends(get_service)):
    stats = raise_result(await service.lemmatize(body.text, body.capture_sentences))
    return stats.to_dict()


@router.post("/lemmatize-file")
async def lemmatize_file(body: LemmatizeFileRequest, service: VocabularyService = Depends(get_service)):
    stats = raise_result(await service.lemmatize_from_file(body.path, body.capture_sentences))
    return stats.to_dict()


@router.post("/rebuild")
async def rebuild_ledger(body: RebuildRequest, service: VocabularyService = Depends(get_service)):
    """Recreate the ledger, optionally keeping blacklisted lemmas."""
    raise_result(await service.rebuild_ledger(body.keep_blacklist))
    return {"rebuilt": True, "keep_blacklist": body.keep_blacklist}


@router.get("/queue", response_model=QueueResponse)
async def get_queue(
    offset: int = Query(0, ge=0),
    by_frequency: bool = Query(False),
    by_general_frequency: bool = Query(False),
    by_first_occurence: bool = Query(False),
    pos: list[WordClass] | None = Query(None),
    service: VocabularyService = Depends(get_service),
):
    """One page of the ranked study queue."""
    signals = QueueSignals(by_frequency, by_general_frequency, by_first_occurence)
    lemmas = raise_result(await service.next_queue_page(offset, signals, set(pos or ())))
    return QueueResponse(offset=offset, lemmas=lemmas)


@router.post("/blacklist")
async def blacklist(body: BlacklistRequest, service: VocabularyService = Depends(get_service)):
    found = raise_result(await service.blacklist(body.lemma))
    return {"lemma": body.lemma, "found": found}


@router.get("/sentences/{lemma}", response_model=list[str])
async def get_sentences(lemma: str, service: VocabularyService = Depends(get_service)):
    return raise_result(await service.get_sentences(lemma))
