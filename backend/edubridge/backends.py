from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from .settings import settings

logger = logging.getLogger(__name__)

MYMEMORY_WARNING = " (MYMEMORY WARNING:"


@dataclass(frozen=True)
class BackendResult:
	"""Outcome of one backend call, one slot per input text.

	A slot is None when that item could not be translated. `error` is set when
	the whole call failed; `status` carries the upstream HTTP status if any.
	"""
	provider: str
	translations: List[Optional[str]] = field(default_factory=list)
	error: Optional[str] = None
	status: Optional[int] = None

	@property
	def ok(self) -> bool:
		return self.error is None

	def get(self, index: int) -> Optional[str]:
		if self.error is not None or index >= len(self.translations):
			return None
		return self.translations[index]

	@classmethod
	def failure(cls, provider: str, count: int, error: str, status: Optional[int] = None) -> "BackendResult":
		return cls(provider=provider, translations=[None] * count, error=error, status=status)


def _clean(value: Any) -> Optional[str]:
	if isinstance(value, str) and value.strip():
		return value.strip()
	return None


def _text(value: Any) -> Optional[str]:
	# Provider output is kept verbatim; blank counts as no translation
	if isinstance(value, str) and value.strip():
		return value
	return None


def strip_provider_warning(text: str) -> str:
	return text.split(MYMEMORY_WARNING)[0]


class ProxyBackend:
	"""Same-origin /api/translate route (one text per call)."""

	name = "proxy"

	def __init__(self, client: httpx.AsyncClient, url: str, *, timeout: Optional[float] = None) -> None:
		self._client = client
		self.url = url
		self.timeout = timeout

	async def translate(self, text: str, target: str, source: Optional[str] = None) -> BackendResult:
		payload: Dict[str, Any] = {"text": text, "targetLang": target}
		if source:
			payload["sourceLang"] = source
		try:
			r = await self._client.post(self.url, json=payload, timeout=self.timeout)
		except httpx.HTTPError as err:
			return BackendResult.failure(self.name, 1, f"request failed: {err!r}")
		if not r.is_success:
			return BackendResult.failure(self.name, 1, f"HTTP {r.status_code}", status=r.status_code)
		try:
			data = r.json()
		except ValueError:
			return BackendResult.failure(self.name, 1, "malformed JSON", status=r.status_code)
		value = None
		if isinstance(data, dict):
			value = _clean(data.get("translatedText")) or _clean(data.get("translated"))
		if value is None:
			return BackendResult.failure(self.name, 1, "empty translation", status=r.status_code)
		return BackendResult(provider=self.name, translations=[value])


class LibreTranslateBackend:
	"""Public LibreTranslate service; one request per batch."""

	name = "libretranslate"

	def __init__(
		self,
		client: httpx.AsyncClient,
		url: str,
		*,
		api_key: Optional[str] = None,
		timeout: Optional[float] = None,
	) -> None:
		self._client = client
		self.url = url
		self.api_key = api_key
		self.timeout = timeout

	async def translate(self, texts: List[str], target: str) -> BackendResult:
		if not texts:
			return BackendResult(provider=self.name, translations=[])
		payload: Dict[str, Any] = {"q": list(texts), "source": "auto", "target": target, "format": "text"}
		if self.api_key:
			payload["api_key"] = self.api_key
		n = len(texts)
		try:
			r = await self._client.post(self.url, json=payload, timeout=self.timeout)
		except httpx.HTTPError as err:
			return BackendResult.failure(self.name, n, f"request failed: {err!r}")
		if not r.is_success:
			return BackendResult.failure(self.name, n, f"HTTP {r.status_code}", status=r.status_code)
		try:
			data = r.json()
		except ValueError:
			return BackendResult.failure(self.name, n, "malformed JSON", status=r.status_code)
		values = self._parse(data)
		if values is None:
			return BackendResult.failure(self.name, n, "unexpected response shape", status=r.status_code)
		# Positions the provider did not answer count as failed items
		values = (values + [None] * n)[:n]
		return BackendResult(provider=self.name, translations=values)

	@staticmethod
	def _parse(data: Any) -> Optional[List[Optional[str]]]:
		if isinstance(data, list):
			return [_text(d.get("translatedText")) if isinstance(d, dict) else None for d in data]
		if isinstance(data, dict):
			value = data.get("translatedText")
			if isinstance(value, list):
				return [_text(v) for v in value]
			if isinstance(value, str):
				return [_text(value)]
		return None


class MyMemoryBackend:
	"""MyMemory GET API, called server-side by the proxy route."""

	name = "mymemory"

	def __init__(self, client: httpx.AsyncClient, url: str, *, timeout: Optional[float] = None) -> None:
		self._client = client
		self.url = url
		self.timeout = timeout

	async def translate(self, text: str, target: str, source: Optional[str] = None) -> BackendResult:
		params = {"q": text, "langpair": f"{source or 'en'}|{target}"}
		try:
			r = await self._client.get(self.url, params=params, timeout=self.timeout)
		except httpx.HTTPError as err:
			return BackendResult.failure(self.name, 1, f"request failed: {err!r}", status=502)
		if not r.is_success:
			return BackendResult.failure(self.name, 1, "Translation service failed", status=r.status_code)
		try:
			data = r.json()
		except ValueError:
			return BackendResult.failure(self.name, 1, "malformed JSON", status=502)
		if not isinstance(data, dict):
			return BackendResult.failure(self.name, 1, "unexpected response shape", status=502)
		try:
			provider_status = int(data.get("responseStatus") or 500)
		except (TypeError, ValueError):
			provider_status = 500
		if provider_status != 200:
			detail = data.get("responseDetails") or "Translation failed within API"
			return BackendResult.failure(self.name, 1, str(detail), status=provider_status)
		raw = (data.get("responseData") or {}).get("translatedText")
		value = _clean(strip_provider_warning(raw)) if isinstance(raw, str) else None
		if value is None:
			return BackendResult.failure(self.name, 1, "empty translation", status=502)
		return BackendResult(provider=self.name, translations=[value])


class TranslationBackend:
	"""Arbitrates between the proxy route and the public service.

	`invoke` sends one batched request to the public service. `translate_one`
	tries the proxy first and falls back to the public service. Neither raises;
	failed items come back as None.
	"""

	def __init__(
		self,
		*,
		proxy_url: Optional[str] = None,
		libretranslate_url: Optional[str] = None,
		libretranslate_api_key: Optional[str] = None,
		timeout: Optional[float] = None,
		client: Optional[httpx.AsyncClient] = None,
	) -> None:
		self.timeout = timeout if timeout is not None else settings.translate_timeout_seconds
		self._owns_client = client is None
		self._client = client or httpx.AsyncClient(timeout=self.timeout)
		self.proxy: Optional[ProxyBackend] = None
		if proxy_url:
			self.proxy = ProxyBackend(self._client, proxy_url, timeout=self.timeout)
		self.public = LibreTranslateBackend(
			self._client,
			libretranslate_url or settings.libretranslate_url,
			api_key=libretranslate_api_key,
			timeout=self.timeout,
		)

	@classmethod
	def from_settings(cls) -> "TranslationBackend":
		return cls(
			proxy_url=settings.translate_proxy_url,
			libretranslate_url=settings.libretranslate_url,
			libretranslate_api_key=settings.libretranslate_api_key,
			timeout=settings.translate_timeout_seconds,
		)

	async def invoke(self, texts: List[str], target: str, source_hint: Optional[str] = None) -> BackendResult:
		"""One batched call to the public service.

		The public service always auto-detects the source language, so
		`source_hint` is only used for logging.
		"""
		result = await self.public.translate(texts, target)
		if not result.ok:
			logger.warning("%s batch of %d (%s -> %s) failed: %s", result.provider, len(texts), source_hint or "auto", target, result.error)
		return result

	async def translate_one(self, text: str, target: str, source_hint: Optional[str] = None) -> Optional[str]:
		if self.proxy is not None:
			result = await self.proxy.translate(text, target, source_hint)
			if result.ok:
				return result.get(0)
			logger.warning("proxy translation to %s failed, falling back: %s", target, result.error)
		return (await self.invoke([text], target, source_hint)).get(0)

	async def aclose(self) -> None:
		if self._owns_client:
			await self._client.aclose()
