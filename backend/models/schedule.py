from sqlalchemy import Column, Float, Integer, Text

from core.database import Base


class CardRecord(Base):
    """Persisted review card (FSRS memory state)"""
    __tablename__ = "cards"

    id = Column(Integer, primary_key=True)
    native = Column(Text, nullable=False)
    target = Column("russian", Text, nullable=False)
    due = Column(Integer, nullable=False)  # Epoch seconds
    stability = Column(Float, nullable=False)  # Days
    difficulty = Column(Float, nullable=False)
