from __future__ import annotations
import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .languages import DEFAULT_LANG, normalize_lang
from .settings import settings
from .translator import Translator

logger = logging.getLogger(__name__)

# "a) ", "B) " ... kept verbatim in front of the translated label
_LABEL_PREFIX = re.compile(r"^([a-d]\)\s*)(.*)$", re.IGNORECASE | re.DOTALL)


class Option(BaseModel):
	label: str
	value: str


class Question(BaseModel):
	model_config = ConfigDict(populate_by_name=True)

	id: str
	text: str
	options: List[Option]
	correct_index: int = Field(alias="correctIndex")


def _split_label(label: str) -> tuple[str, str]:
	m = _LABEL_PREFIX.match(label)
	if m:
		return m.group(1), m.group(2)
	return "", label


async def translate_questions(translator: Translator, questions: List[Question], target_lang: Optional[str]) -> List[Question]:
	"""Translate stems, option values and option labels in a single batch."""
	target = normalize_lang(target_lang)
	if not questions or target == DEFAULT_LANG:
		return questions

	strings: List[str] = []
	seen: Dict[str, int] = {}

	def slot(s: str) -> int:
		if s not in seen:
			seen[s] = len(strings)
			strings.append(s)
		return seen[s]

	plans = []
	for q in questions:
		text_idx = slot(q.text)
		opts = []
		for opt in q.options:
			prefix, core = _split_label(opt.label)
			opts.append((prefix, slot(core), slot(opt.value)))
		plans.append((text_idx, opts))

	translated = await translator.translate_batch(strings, target)

	out: List[Question] = []
	for q, (text_idx, opts) in zip(questions, plans):
		options = [
			Option(label=f"{prefix}{translated[label_idx]}", value=translated[value_idx])
			for prefix, label_idx, value_idx in opts
		]
		out.append(q.model_copy(update={"text": translated[text_idx], "options": options}))
	return out


async def translate_question(translator: Translator, question: Question, target_lang: Optional[str]) -> Question:
	return (await translate_questions(translator, [question], target_lang))[0]


def _quiz_path(quiz_dir: str, code: str) -> str:
	return os.path.join(quiz_dir, f"quiz_i18n_{code}.json")


def _read_bank(path: str) -> Any:
	with open(path, "r", encoding="utf-8") as f:
		return json.load(f)


def _extract(data: Any, grade: str, subject: str, chapter: str, difficulty: str) -> List[Question]:
	node = data
	for key in (grade, subject, chapter, difficulty):
		if not isinstance(node, dict):
			return []
		node = node.get(key)
	if not isinstance(node, list):
		return []
	questions = []
	for raw in node:
		try:
			questions.append(Question.model_validate(raw))
		except ValidationError as e:
			logger.warning("Skipping malformed quiz question in %s/%s/%s: %s", subject, chapter, difficulty, e)
	return questions


def load_quiz(
	lang: Optional[str],
	grade: str,
	subject: str,
	chapter: str,
	difficulty: str = "Easy",
	*,
	quiz_dir: Optional[str] = None,
) -> List[Question]:
	"""Questions from the pre-translated bank for `lang`, falling back to English."""
	quiz_dir = quiz_dir or settings.quiz_dir
	code = normalize_lang(lang)
	if code != DEFAULT_LANG:
		path = _quiz_path(quiz_dir, code)
		try:
			questions = _extract(_read_bank(path), grade, subject, chapter, difficulty)
			if questions:
				return questions
			logger.warning("No questions found in %s. Falling back to English.", code)
		except (OSError, ValueError) as e:
			logger.error("Error loading quiz for %s: %s", code, e)
	try:
		return _extract(_read_bank(_quiz_path(quiz_dir, DEFAULT_LANG)), grade, subject, chapter, difficulty)
	except (OSError, ValueError) as e:
		logger.error("English quiz bank missing or unreadable: %s", e)
		return []
