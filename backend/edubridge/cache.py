from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .keys import hash_key, memory_key
from .tiers import DocumentNotFound, LocalTier, MemoryTier, RemoteStore

logger = logging.getLogger(__name__)

# (source, translated)
Pair = Tuple[str, str]


@dataclass(frozen=True)
class PersistReport:
	local_ok: bool
	remote_ok: bool
	error: Optional[str] = None


class TranslationCache:
	"""Memory -> local file -> shared remote dictionary.

	Lookups consult memory then the local tier. The remote tier is read only by
	`preload`, which copies a whole language dictionary into the faster tiers.
	Hits are never promoted between tiers during a lookup.
	"""

	def __init__(
		self,
		*,
		local: Optional[LocalTier] = None,
		remote: Optional[RemoteStore] = None,
	) -> None:
		self.memory = MemoryTier()
		self.local = local
		self.remote = remote

	def lookup(self, lang: str, text: str) -> Optional[str]:
		key = memory_key(lang, text)
		hit = self.memory.get(key)
		if hit is not None:
			return hit
		if self.local is not None:
			return self.local.get(key)
		return None

	def tier_of(self, lang: str, text: str) -> Optional[str]:
		"""Name of the fastest tier holding (lang, text), for diagnostics."""
		key = memory_key(lang, text)
		if self.memory.get(key) is not None:
			return "memory"
		if self.local is not None and self.local.get(key) is not None:
			return "local"
		return None

	async def persist(self, lang: str, pairs: List[Pair]) -> PersistReport:
		if not pairs:
			return PersistReport(local_ok=True, remote_ok=True)
		items = [(memory_key(lang, s), t) for s, t in pairs]
		self.memory.set_many(items)
		local_ok = True
		if self.local is not None:
			local_ok = self.local.set_many(items)
		if self.remote is None:
			return PersistReport(local_ok=local_ok, remote_ok=True)
		patch = {hash_key(s): {"s": s, "t": t} for s, t in pairs}
		try:
			await self._merge_remote(lang, patch)
		except Exception as e:
			logger.warning("Remote translation write failed for %s (%d entries): %s", lang, len(patch), e)
			return PersistReport(local_ok=local_ok, remote_ok=False, error=str(e))
		return PersistReport(local_ok=local_ok, remote_ok=True)

	async def _merge_remote(self, lang: str, patch) -> None:
		try:
			await self.remote.merge_entries(lang, patch)
		except DocumentNotFound:
			logger.info("Creating translation document for %s", lang)
			await self.remote.create_document(lang)
			await self.remote.merge_entries(lang, patch)

	async def preload(self, lang: str) -> int:
		"""Copy the remote dictionary for `lang` into memory and local tiers.

		Returns the number of entries loaded; 0 on any failure.
		"""
		if self.remote is None:
			return 0
		try:
			dictionary = await self.remote.read_dictionary(lang)
		except Exception as e:
			logger.warning("Translation preload failed for %s: %s", lang, e)
			return 0
		items = []
		for entry in dictionary.values():
			source = entry.get("s") if isinstance(entry, dict) else None
			translated = entry.get("t") if isinstance(entry, dict) else None
			if not source or not isinstance(translated, str):
				continue
			items.append((memory_key(lang, source), translated))
		self.memory.set_many(items)
		if self.local is not None and items:
			self.local.set_many(items)
		logger.debug("Preloaded %d translations for %s", len(items), lang)
		return len(items)
