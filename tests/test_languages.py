import pytest

from edubridge.languages import SUPPORTED_LANGUAGES, language_name, normalize_lang


def test_names_codes_and_casing_agree():
	assert normalize_lang("Hindi") == normalize_lang("hi") == normalize_lang("HI") == "hi"


@pytest.mark.parametrize("value,expected", [
	("Marathi", "mr"),
	("  tamil ", "ta"),
	("ODIA", "or"),
	("tm", "ta"),
	("pn", "pa"),
	("English", "en"),
])
def test_known_spellings(value, expected):
	assert normalize_lang(value) == expected


@pytest.mark.parametrize("value", [None, "", "   ", "klingon", "fr"])
def test_unknown_or_empty_defaults_to_english(value):
	assert normalize_lang(value) == "en"


def test_every_supported_code_is_canonical():
	for code in SUPPORTED_LANGUAGES:
		assert normalize_lang(code) == code


def test_language_name():
	assert language_name("mr") == "Marathi"
	assert language_name("nonsense") == "English"
