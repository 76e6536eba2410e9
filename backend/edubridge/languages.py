from __future__ import annotations
from typing import Dict, Optional

DEFAULT_LANG = "en"

# UI language names/variants -> codes the translation providers expect
LANG_CODE_MAP: Dict[str, str] = {
	"en": "en", "english": "en",
	"hi": "hi", "hindi": "hi",
	"mr": "mr", "marathi": "mr",
	"bn": "bn", "bengali": "bn",
	"ta": "ta", "tamil": "ta",
	"pa": "pa", "punjabi": "pa",
	"as": "as", "assamese": "as",
	"gu": "gu", "gujarati": "gu",
	"te": "te", "telugu": "te",
	"kn": "kn", "kannada": "kn",
	"ml": "ml", "malayalam": "ml",
	"or": "or", "odia": "or",
	# convenience aliases used by the quiz banks
	"tm": "ta", "pn": "pa",
}

LANGUAGE_NAMES: Dict[str, str] = {
	"en": "English",
	"hi": "Hindi",
	"mr": "Marathi",
	"bn": "Bengali",
	"ta": "Tamil",
	"pa": "Punjabi",
	"as": "Assamese",
	"gu": "Gujarati",
	"te": "Telugu",
	"kn": "Kannada",
	"ml": "Malayalam",
	"or": "Odia",
}

SUPPORTED_LANGUAGES = tuple(LANGUAGE_NAMES)


def normalize_lang(value: Optional[str]) -> str:
	"""Map a language name or code (any casing) to its canonical code.

	Empty and unknown inputs resolve to English.
	"""
	if not value:
		return DEFAULT_LANG
	key = str(value).strip().lower()
	return LANG_CODE_MAP.get(key, DEFAULT_LANG)


def language_name(value: Optional[str]) -> str:
	return LANGUAGE_NAMES[normalize_lang(value)]
