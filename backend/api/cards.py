"""Cards API Routes

Card creation, due cards, FSRS reviews and Anki export.
"""
import time

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.deps import get_service
from core.errors.handlers import raise_result
from engines.fsrs import Card, Grade
from engines.service import VocabularyService

router = APIRouter()


class CardCreate(BaseModel):
    native: str = Field(min_length=1)
    target: str = Field(min_length=1)


class CardModel(BaseModel):
    id: int
    native: str
    target: str
    due: int
    stability: float = Field(ge=0)
    difficulty: float = Field(ge=0)

    class Config:
        from_attributes = True


class ReviewRequest(BaseModel):
    card: CardModel
    grade: Grade
    review_time: int | None = None


class ExportRequest(BaseModel):
    path: str


@router.post("", response_model=CardModel)
async def create_card(body: CardCreate, service: VocabularyService = Depends(get_service)):
    """Commit a queue item as a new card (blacklists the lemma)."""
    return raise_result(await service.insert_card(body.native, body.target))


@router.get("/due", response_model=list[CardModel])
async def due_cards(
    as_of: int | None = Query(None, description="Epoch seconds; defaults to now"),
    service: VocabularyService = Depends(get_service),
):
    as_of = int(time.time()) if as_of is None else as_of
    return raise_result(await service.due_cards(as_of))


@router.post("/review", response_model=CardModel)
async def review(body: ReviewRequest, service: VocabularyService = Depends(get_service)):
    """Grade a card and persist its new memory state."""
    review_time = int(time.time()) if body.review_time is None else body.review_time
    card = Card(**body.card.model_dump())
    reviewed = service.review_card(card, body.grade, review_time)
    raise_result(await service.update_cards([reviewed]))
    return reviewed


@router.post("/export")
async def export_cards(body: ExportRequest, service: VocabularyService = Depends(get_service)):
    count = raise_result(await service.export_cards(body.path))
    return {"path": body.path, "cards": count}
