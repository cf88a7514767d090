"""Shared route dependencies."""
from core.database import get_store
from engines.service import VocabularyService


def get_service() -> VocabularyService:
    """Service over the process-wide store."""
    return VocabularyService(get_store())
