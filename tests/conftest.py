"""
Shared fixtures for the translation cache tests.
"""

import asyncio

import pytest
from sqlalchemy.orm import sessionmaker

from edubridge.backends import BackendResult
from edubridge.cache import TranslationCache
from edubridge.db import Base, make_engine
from edubridge.tiers import DocumentNotFound, LocalTier, RemoteStore, SqlRemoteStore
from edubridge.translator import Translator


class FakeRemoteStore(RemoteStore):
	"""Dict-backed RemoteStore that yields to the loop on every call."""

	def __init__(self):
		self.documents = {}
		self.merge_calls = 0
		self.create_calls = 0
		self.fail_reads = False
		self.fail_writes = False

	async def read_dictionary(self, lang):
		await asyncio.sleep(0)
		if self.fail_reads:
			raise ConnectionError("remote store unreachable")
		return {k: dict(v) for k, v in self.documents.get(lang, {}).items()}

	async def merge_entries(self, lang, patch):
		self.merge_calls += 1
		await asyncio.sleep(0)
		if self.fail_writes:
			raise ConnectionError("remote store unreachable")
		if lang not in self.documents:
			raise DocumentNotFound(lang)
		for key, entry in patch.items():
			await asyncio.sleep(0)
			self.documents[lang][key] = dict(entry)

	async def create_document(self, lang):
		self.create_calls += 1
		await asyncio.sleep(0)
		self.documents.setdefault(lang, {})


class StubBackend:
	"""Stands in for TranslationBackend; answers from a (target, text) table."""

	def __init__(self, table=None, *, fail=False):
		self.table = dict(table or {})
		self.fail = fail
		self.invoke_calls = []
		self.one_calls = []
		self.closed = False

	async def invoke(self, texts, target, source_hint=None):
		self.invoke_calls.append((list(texts), target))
		if self.fail:
			return BackendResult.failure("stub", len(texts), "backend down")
		return BackendResult(provider="stub", translations=[self.table.get((target, t)) for t in texts])

	async def translate_one(self, text, target, source_hint=None):
		self.one_calls.append((text, target, source_hint))
		if self.fail:
			return None
		return self.table.get((target, text))

	async def aclose(self):
		self.closed = True


@pytest.fixture
def remote():
	return FakeRemoteStore()


@pytest.fixture
def local(tmp_path):
	return LocalTier(str(tmp_path / "translation_cache.json"))


@pytest.fixture
def cache(local, remote):
	return TranslationCache(local=local, remote=remote)


@pytest.fixture
def make_translator(cache):
	def _make(table=None, *, fail=False):
		backend = StubBackend(table, fail=fail)
		return Translator(cache, backend), backend
	return _make


@pytest.fixture
def sql_session_factory(tmp_path):
	engine = make_engine(f"sqlite:///{tmp_path / 'remote.db'}")
	Base.metadata.create_all(bind=engine)
	yield sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
	engine.dispose()


@pytest.fixture
def sql_store(sql_session_factory):
	return SqlRemoteStore(sql_session_factory)
