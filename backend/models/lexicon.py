"""Lexicon schema: dictionary words and everything hanging off them.

Rebuilt from scratch by every dictionary import. Table and column names
are shared with existing data files and must not change.
"""
from sqlalchemy import Column, ForeignKey, Index, Integer, Table, Text
from sqlalchemy.orm import relationship

from core.database import Base


class Word(Base):
    """Dictionary headword with one part of speech"""
    __tablename__ = "words"
    __table_args__ = (
        Index("word_index", "word"),
    )

    id = Column(Integer, primary_key=True)
    word = Column(Text, nullable=False)
    pos = Column(Text, nullable=False)  # noun, verb, adj, adv, det, particle, intj, conj, pron, prep
    etymology = Column(Text)
    expansion = Column(Text)  # Rendered head template, e.g. "дом • (dom) m inan (genitive до́ма)"

    senses = relationship("Sense", back_populates="word", order_by="Sense.relevance")
    forms = relationship("Form", back_populates="word", order_by="Form.id")
    pronunciations = relationship("Pronunciation", back_populates="word", order_by="Pronunciation.id")


class Sense(Base):
    """One meaning of a word; relevance is its position in the source record"""
    __tablename__ = "senses"
    __table_args__ = (
        Index("sense_index", "word_id"),
    )

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    sense = Column(Text)  # First gloss
    relevance = Column(Integer, nullable=False)

    word = relationship("Word", back_populates="senses")


class Form(Base):
    """Inflected form from a declension or conjugation table"""
    __tablename__ = "forms"
    __table_args__ = (
        Index("word_form_index", "word_id"),
        Index("normalized_form_index", "normalized_form"),
    )

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    form = Column(Text, nullable=False)
    normalized_form = Column(Text, nullable=False)  # Stress marks stripped; lemmatization key

    word = relationship("Word", back_populates="forms")


class Pronunciation(Base):
    __tablename__ = "pronunciation"
    __table_args__ = (
        Index("pronunciation_index", "word_id"),
    )

    id = Column(Integer, primary_key=True)
    word_id = Column(Integer, ForeignKey("words.id"), nullable=False)
    ipa = Column(Text, nullable=False)

    word = relationship("Word", back_populates="pronunciations")


class Synonym(Base):
    __tablename__ = "synonyms"

    id = Column(Integer, primary_key=True)
    synonym = Column(Text, nullable=False)


examples = Table(
    "examples",
    Base.metadata,
    Column("sense_id", Integer, ForeignKey("senses.id"), nullable=False),
    Column("text", Text, nullable=False),
    Column("english", Text),
    Index("example_index", "sense_id"),
)

sense_synonyms = Table(
    "sense_synonyms",
    Base.metadata,
    Column("sense_id", Integer, ForeignKey("senses.id"), nullable=False),
    Column("synonym_id", Integer, ForeignKey("synonyms.id"), nullable=False),
    Index("sense_synonym_index", "sense_id"),
)

sense_tags = Table(
    "sense_tags",
    Base.metadata,
    Column("sense_id", Integer, ForeignKey("senses.id"), nullable=False),
    Column("tag", Text, nullable=False),
)

form_tags = Table(
    "form_tags",
    Base.metadata,
    Column("form_id", Integer, ForeignKey("forms.id"), nullable=False),
    Column("tag", Text, nullable=False),
    Index("form_tag_index", "form_id"),
)

pronunciation_tags = Table(
    "pronunciation_tags",
    Base.metadata,
    Column("pronunciation_id", Integer, ForeignKey("pronunciation.id"), nullable=False),
    Column("tag", Text, nullable=False),
)

# Corpus rank per word id (0 = most frequent); homographs share a rank
frequency = Table(
    "frequency",
    Base.metadata,
    Column("word_id", Integer, ForeignKey("words.id"), nullable=False),
    Column("frequency", Integer),
    Index("frequency_index", "word_id"),
)

LEXICON_TABLES = [
    Word.__table__,
    Sense.__table__,
    Form.__table__,
    Pronunciation.__table__,
    Synonym.__table__,
    examples,
    sense_synonyms,
    sense_tags,
    form_tags,
    pronunciation_tags,
    frequency,
]
