from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from .db import Base


class TranslationDocument(Base):
	__tablename__ = "translation_documents"
	# One row per canonical language code; entries hang off it
	lang = Column(String(8), primary_key=True)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class TranslationEntry(Base):
	__tablename__ = "translation_entries"
	lang = Column(String(8), ForeignKey("translation_documents.lang"), primary_key=True)
	# hash_key(source) so the key stays short and charset-safe
	key = Column(String(32), primary_key=True)
	s = Column(Text, nullable=False)
	t = Column(Text, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
