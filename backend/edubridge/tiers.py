from __future__ import annotations
import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

from sqlalchemy import insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from .models import TranslationDocument, TranslationEntry

logger = logging.getLogger(__name__)

# Dialects with INSERT .. ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {"sqlite": sqlite.insert, "postgresql": postgresql.insert}

# hash_key(source) -> {"s": source, "t": translated}
Dictionary = Dict[str, Dict[str, str]]


class MemoryTier:
	"""Process-local map, owned by one TranslationCache."""

	def __init__(self) -> None:
		self._data: Dict[str, str] = {}

	def get(self, key: str) -> Optional[str]:
		return self._data.get(key)

	def set_many(self, items: Iterable[Tuple[str, str]]) -> None:
		self._data.update(items)

	def __len__(self) -> int:
		return len(self._data)


class LocalTier:
	"""String key -> value store persisted to a JSON file.

	Best-effort: an unreadable file makes the tier unavailable (every lookup
	misses) and a failed write leaves the stored state unchanged. Neither raises.
	"""

	def __init__(self, path: str) -> None:
		self.path = path
		self._data: Optional[Dict[str, str]] = None
		self._loaded = False

	def _load(self) -> Optional[Dict[str, str]]:
		if self._loaded:
			return self._data
		self._loaded = True
		try:
			with open(self.path, "r", encoding="utf-8") as f:
				raw = json.load(f)
			self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
		except FileNotFoundError:
			self._data = {}
		except (OSError, ValueError, AttributeError) as e:
			logger.warning("Local translation cache unavailable (%s): %s", self.path, e)
			self._data = None
		return self._data

	@property
	def available(self) -> bool:
		return self._load() is not None

	def get(self, key: str) -> Optional[str]:
		data = self._load()
		if data is None:
			return None
		return data.get(key)

	def set_many(self, items: Iterable[Tuple[str, str]]) -> bool:
		data = self._load()
		if data is None:
			return False
		updated = dict(data)
		updated.update(items)
		try:
			self._write(updated)
		except OSError as e:
			logger.warning("Local translation cache write failed (%s): %s", self.path, e)
			return False
		self._data = updated
		return True

	def _write(self, data: Dict[str, str]) -> None:
		directory = os.path.dirname(os.path.abspath(self.path))
		fd, tmp_path = tempfile.mkstemp(prefix=".translation_cache.", dir=directory)
		try:
			with os.fdopen(fd, "w", encoding="utf-8") as f:
				json.dump(data, f, ensure_ascii=False)
			os.replace(tmp_path, self.path)
		except OSError:
			try:
				os.unlink(tmp_path)
			except OSError:
				pass
			raise


class DocumentNotFound(Exception):
	def __init__(self, lang: str) -> None:
		super().__init__(f"translation document {lang!r} does not exist")
		self.lang = lang


class RemoteStore(ABC):
	"""Shared per-language dictionaries, safe under concurrent writers."""

	@abstractmethod
	async def read_dictionary(self, lang: str) -> Dictionary:
		"""Return the whole dictionary for `lang` ({} when the document is missing)."""

	@abstractmethod
	async def merge_entries(self, lang: str, patch: Dictionary) -> None:
		"""Write only the keys in `patch`; raise DocumentNotFound if `lang` has no document."""

	@abstractmethod
	async def create_document(self, lang: str) -> None:
		"""Create an empty document for `lang`; no-op if it already exists."""


class SqlRemoteStore(RemoteStore):
	"""RemoteStore on the SQLAlchemy tables in models.py.

	Each entry is its own row, so a merge only ever touches the keys it writes.
	"""

	def __init__(self, session_factory) -> None:
		self._session_factory = session_factory

	async def read_dictionary(self, lang: str) -> Dictionary:
		return await asyncio.to_thread(self._read_dictionary, lang)

	async def merge_entries(self, lang: str, patch: Dictionary) -> None:
		if not patch:
			return
		await asyncio.to_thread(self._merge_entries, lang, patch)

	async def create_document(self, lang: str) -> None:
		await asyncio.to_thread(self._create_document, lang)

	def _read_dictionary(self, lang: str) -> Dictionary:
		with self._session_factory() as db:
			rows = db.execute(select(TranslationEntry).where(TranslationEntry.lang == lang)).scalars().all()
			return {row.key: {"s": row.s, "t": row.t} for row in rows}

	def _merge_entries(self, lang: str, patch: Dictionary) -> None:
		with self._session_factory() as db:
			if db.get(TranslationDocument, lang) is None:
				raise DocumentNotFound(lang)
			now = datetime.utcnow()
			rows = [
				{"lang": lang, "key": key, "s": entry["s"], "t": entry["t"], "updated_at": now}
				for key, entry in patch.items()
			]
			upsert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
			if upsert is not None:
				stmt = upsert(TranslationEntry).values(rows)
				stmt = stmt.on_conflict_do_update(
					index_elements=["lang", "key"],
					set_={"s": stmt.excluded.s, "t": stmt.excluded.t, "updated_at": stmt.excluded.updated_at},
				)
				db.execute(stmt)
			else:
				for row in rows:
					self._insert_or_update(db, row)
			db.commit()

	@staticmethod
	def _insert_or_update(db, row) -> None:
		try:
			with db.begin_nested():
				db.execute(insert(TranslationEntry).values(**row))
		except IntegrityError:
			# Row written concurrently; last write wins
			db.execute(
				update(TranslationEntry)
				.where(TranslationEntry.lang == row["lang"], TranslationEntry.key == row["key"])
				.values(s=row["s"], t=row["t"], updated_at=row["updated_at"])
			)

	def _create_document(self, lang: str) -> None:
		with self._session_factory() as db:
			if db.get(TranslationDocument, lang) is not None:
				return
			db.add(TranslationDocument(lang=lang))
			try:
				db.commit()
			except IntegrityError:
				# Another writer created it first
				db.rollback()
