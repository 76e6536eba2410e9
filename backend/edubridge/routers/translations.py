from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..quiz import Question, load_quiz, translate_questions
from ..translator import Translator, get_translator

router = APIRouter(prefix="/translations", tags=["translations"])


class BatchRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	texts: List[str]
	target_lang: Optional[str] = Field(default=None, alias="targetLang")


class ToEnglishRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	text: str
	source_lang: Optional[str] = Field(default=None, alias="sourceLang")


class FromEnglishRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	text: str
	target_lang: Optional[str] = Field(default=None, alias="targetLang")


class QuizTranslateRequest(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	questions: List[Question]
	target_lang: Optional[str] = Field(default=None, alias="targetLang")


@router.post("/batch")
async def translate_batch(req: BatchRequest, translator: Translator = Depends(get_translator)):
	return {"translations": await translator.translate_batch(req.texts, req.target_lang)}


@router.post("/to-english")
async def to_english(req: ToEnglishRequest, translator: Translator = Depends(get_translator)):
	return {"translated": await translator.translate_to_english(req.text, req.source_lang)}


@router.post("/from-english")
async def from_english(req: FromEnglishRequest, translator: Translator = Depends(get_translator)):
	return {"translated": await translator.translate_from_english(req.text, req.target_lang)}


@router.post("/preload/{lang}")
async def preload(lang: str, translator: Translator = Depends(get_translator)):
	return {"loaded": await translator.preload_translation_cache(lang)}


@router.post("/quiz")
async def translate_quiz(req: QuizTranslateRequest, translator: Translator = Depends(get_translator)):
	questions = await translate_questions(translator, req.questions, req.target_lang)
	return {"questions": [q.model_dump(by_alias=True) for q in questions]}


@router.get("/quiz/{lang}")
def quiz_bank(lang: str, grade: str, subject: str, chapter: str, difficulty: str = "Easy"):
	questions = load_quiz(lang, grade, subject, chapter, difficulty)
	return {"questions": [q.model_dump(by_alias=True) for q in questions]}
