from __future__ import annotations
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..backends import MyMemoryBackend
from ..gemini_client import GeminiClient
from ..languages import normalize_lang
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["translate"])


class ProxyRequest(BaseModel):
	text: Optional[str] = None
	sourceLang: Optional[str] = None
	targetLang: Optional[str] = None
	# Older clients send {source, target}
	source: Optional[str] = None
	target: Optional[str] = None


async def get_mymemory():
	client = httpx.AsyncClient(timeout=settings.translate_timeout_seconds)
	try:
		yield MyMemoryBackend(client, settings.mymemory_url)
	finally:
		await client.aclose()


async def get_gemini():
	# Only used when a key is configured; MyMemory alone otherwise
	if not settings.gemini_api_key:
		yield None
		return
	client = GeminiClient()
	try:
		yield client
	finally:
		await client.aclose()


@router.post("/translate")
async def translate(
	req: ProxyRequest,
	mymemory: MyMemoryBackend = Depends(get_mymemory),
	gemini: Optional[GeminiClient] = Depends(get_gemini),
):
	text = req.text
	target_raw = req.targetLang or req.target
	if not text or not target_raw:
		return JSONResponse({"error": "Missing required parameters: text and targetLang"}, status_code=400)
	target = normalize_lang(target_raw)
	source_raw = req.sourceLang or req.source
	source = normalize_lang(source_raw) if source_raw and source_raw != "auto" else None
	if source == target:
		return {"translatedText": text}

	try:
		if gemini is not None:
			try:
				return {"translatedText": await gemini.translate(text, target, source)}
			except Exception as e:
				logger.warning("Gemini translation failed, using MyMemory: %s", e)

		result = await mymemory.translate(text, target, source)
		if not result.ok:
			logger.error("MyMemory API error (%s): %s", result.status, result.error)
			return JSONResponse({"error": result.error}, status_code=result.status or 500)
		return {"translatedText": result.get(0)}
	except Exception:
		logger.exception("Translate route unexpected error")
		return JSONResponse({"error": "An internal server error occurred"}, status_code=500)
