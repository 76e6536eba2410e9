from __future__ import annotations
import logging
from typing import List, Optional, Sequence

from .backends import TranslationBackend
from .cache import TranslationCache
from .languages import DEFAULT_LANG, normalize_lang
from .settings import settings
from .tiers import LocalTier, SqlRemoteStore

logger = logging.getLogger(__name__)

# Common UI words worth having cached before first render
DEFAULT_UI_PHRASES = ("Start", "Next", "Previous", "Finish", "Saving…", "Review", "Your score")


class Translator:
	"""Public translation entry points on top of a TranslationCache.

	Translation is best-effort: whenever every backend fails the caller gets
	the original text back, never an exception.
	"""

	def __init__(self, cache: TranslationCache, backend: TranslationBackend) -> None:
		self.cache = cache
		self.backend = backend

	async def translate_batch(self, texts: Sequence[str], target_lang: Optional[str]) -> List[str]:
		lang = normalize_lang(target_lang)
		texts = list(texts)
		if not texts or lang == DEFAULT_LANG:
			return texts

		out: List[Optional[str]] = [self.cache.lookup(lang, t) for t in texts]
		missing_idx = [i for i, val in enumerate(out) if val is None]
		if not missing_idx:
			return out  # type: ignore[return-value]

		# Duplicates inside one batch are sent once
		unique: List[str] = []
		for i in missing_idx:
			if texts[i] not in unique:
				unique.append(texts[i])
		result = await self.backend.invoke(unique, lang)

		resolved = {}
		for j, source in enumerate(unique):
			translated = result.get(j)
			if translated is not None:
				resolved[source] = translated
		for i in missing_idx:
			out[i] = resolved.get(texts[i], texts[i])

		if resolved:
			await self.cache.persist(lang, list(resolved.items()))
		if len(resolved) < len(unique):
			logger.info("%d of %d texts left untranslated for %s", len(unique) - len(resolved), len(unique), lang)
		return out  # type: ignore[return-value]

	async def translate_to_english(self, text: str, source_lang_hint: Optional[str]) -> str:
		"""Student -> teacher direction of the doubt flow."""
		source = normalize_lang(source_lang_hint)
		if not text or not text.strip() or source == DEFAULT_LANG:
			return text
		return await self._translate_one(text, DEFAULT_LANG, source)

	async def translate_from_english(self, text: str, target_lang: Optional[str]) -> str:
		"""Teacher -> student direction of the doubt flow."""
		target = normalize_lang(target_lang)
		if not text or not text.strip() or target == DEFAULT_LANG:
			return text
		return await self._translate_one(text, target, DEFAULT_LANG)

	async def _translate_one(self, text: str, target: str, source: str) -> str:
		cached = self.cache.lookup(target, text)
		if cached is not None:
			return cached
		translated = await self.backend.translate_one(text, target, source)
		if translated is None:
			logger.info("Passing through untranslated text (%s -> %s)", source, target)
			return text
		await self.cache.persist(target, [(text, translated)])
		return translated

	async def preload_translation_cache(self, lang: Optional[str]) -> int:
		return await self.cache.preload(normalize_lang(lang))

	async def prewarm(self, lang: Optional[str], phrases: Sequence[str] = DEFAULT_UI_PHRASES) -> List[str]:
		return await self.translate_batch(phrases, lang)

	async def aclose(self) -> None:
		await self.backend.aclose()


def build_translator() -> Translator:
	local = LocalTier(settings.local_cache_path) if settings.local_cache_enabled else None
	remote = None
	if settings.remote_cache_enabled:
		from .db import SessionLocal
		remote = SqlRemoteStore(SessionLocal)
	return Translator(TranslationCache(local=local, remote=remote), TranslationBackend.from_settings())


_translator: Optional[Translator] = None


def get_translator() -> Translator:
	"""Process-wide Translator, built from settings on first use."""
	global _translator
	if _translator is None:
		_translator = build_translator()
	return _translator


async def close_translator() -> None:
	global _translator
	if _translator is not None:
		await _translator.aclose()
		_translator = None
