"""Lemma ledger: what the learner has met in their own reading.

Keyed by lemma text rather than word id, so it survives a dictionary
rebuild.
"""
from sqlalchemy import CheckConstraint, Column, ForeignKey, Index, Integer, Table, Text

from core.database import Base


class Lemma(Base):
    """Candidate for the study queue"""
    __tablename__ = "lemmas"
    __table_args__ = (
        CheckConstraint("blacklisted IN (0, 1)"),
    )

    lemma = Column(Text, primary_key=True)
    frequency = Column(Integer, nullable=False)  # Times seen in imported text
    general_frequency = Column(Integer)  # Corpus rank copied from the lexicon at first sight
    blacklisted = Column(Integer, nullable=False, default=0)
    first_occurence = Column(Integer, nullable=False)  # Global word position of first sight


sentences = Table(
    "sentences",
    Base.metadata,
    Column("lemma", Text, ForeignKey("lemmas.lemma", ondelete="CASCADE"), nullable=False),
    Column("sentence", Text, nullable=False),
    Index("sentence_index", "lemma"),
)
