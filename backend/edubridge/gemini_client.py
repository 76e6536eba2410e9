from __future__ import annotations
import httpx
from typing import Any, Dict, Optional
from .languages import language_name
from .settings import settings

class GeminiClient:
	def __init__(self, api_key: Optional[str] = None, *, base_url: Optional[str] = None, model: Optional[str] = None, timeout: Optional[float] = None) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise ValueError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		# Google AI Studio (Generative Language API)
		self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
		timeout = timeout if timeout is not None else settings.translate_timeout_seconds
		self._client = httpx.AsyncClient(timeout=timeout)
		self._fallback_client: Optional[httpx.AsyncClient] = None
		self._fallback_enabled = bool(settings.openrouter_api_key)
		self._openrouter_api_key = settings.openrouter_api_key
		self._openrouter_model = settings.openrouter_model
		self._openrouter_base_url = settings.openrouter_base_url
		self._openrouter_headers = {
			"Authorization": f"Bearer {self._openrouter_api_key}" if self._openrouter_api_key else "",
			"Content-Type": "application/json",
			"HTTP-Referer": settings.openrouter_referer,
			"X-Title": settings.openrouter_title,
		}
		if self._fallback_enabled:
			self._fallback_client = httpx.AsyncClient(timeout=timeout)

	async def translate(self, text: str, target_lang: str, source_lang: Optional[str] = None) -> str:
		prompt = build_translation_prompt(text, target_lang, source_lang)
		out = (await self.generate(prompt)).strip()
		if not out:
			raise RuntimeError("Gemini returned an empty translation")
		return out

	async def generate(self, prompt: str) -> str:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		last_error: Optional[Exception] = None
		try:
			r = await self._client.post(self.base_url, params={"key": self.api_key}, json=payload)
			r.raise_for_status()
		except httpx.HTTPError as err:
			last_error = err
		if last_error is None:
			try:
				data = r.json()
				return data["candidates"][0]["content"]["parts"][0]["text"]
			except Exception:
				last_error = RuntimeError(f"Unexpected Gemini response: {r.text}")
		if not self._fallback_enabled:
			raise last_error
		return await self._fallback_generate(prompt, last_error)

	async def aclose(self) -> None:
		await self._client.aclose()
		if self._fallback_client is not None:
			await self._fallback_client.aclose()

	async def _fallback_generate(self, prompt: str, primary_error: Optional[Exception]) -> str:
		if not self._fallback_client or not self._openrouter_api_key:
			raise primary_error or RuntimeError("Fallback requested but OpenRouter is not configured")
		headers = {k: v for k, v in self._openrouter_headers.items() if v}
		payload: Dict[str, Any] = {
			"model": self._openrouter_model,
			"messages": [{"role": "user", "content": prompt}],
		}
		try:
			r = await self._fallback_client.post(
				self._openrouter_base_url,
				headers=headers,
				json=payload,
			)
			r.raise_for_status()
			data = r.json()
			return data["choices"][0]["message"]["content"]
		except Exception as fallback_err:
			if primary_error is not None:
				raise RuntimeError(
					f"Gemini primary call failed ({primary_error}); fallback via OpenRouter also failed"
				) from fallback_err
			raise fallback_err


def build_translation_prompt(text: str, target_lang: str, source_lang: Optional[str] = None) -> str:
	source = f"from {language_name(source_lang)} " if source_lang else ""
	return (
		f"Translate the following text {source}into {language_name(target_lang)}.\n"
		"It is a message between a student and a teacher; keep the meaning, tone and any numbers or formulas unchanged.\n"
		"Return ONLY the translated text, with no quotes, notes or explanations.\n\n"
		f"Text:\n{text}"
	)
