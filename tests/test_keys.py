import re

from edubridge.keys import djb2, hash_key, memory_key


def test_known_values():
	# 5381 -> "45h"; 5381 * 33 ^ ord("a") = 177604 -> "3t1g"
	assert djb2("") == "45h"
	assert hash_key("") == "k_45h"
	assert hash_key("a") == "k_3t1g"


def test_deterministic_and_field_safe():
	text = "Good morning"
	assert hash_key(text) == hash_key(text)
	assert re.fullmatch(r"k_[0-9a-z]+", hash_key("सुप्रभात, कैसे हो?"))


def test_stays_within_32_bits():
	key = hash_key("x" * 10000)
	# 2**32 needs at most 7 base36 digits
	assert len(key) <= len("k_") + 7


def test_distinguishes_simple_inputs():
	assert hash_key("Next") != hash_key("Previous")


def test_astral_characters_hash_per_utf16_unit():
	# U+1F600 is hashed as its surrogate pair 0xD83D 0xDE00
	assert djb2("😀") == "35rq0"


def test_memory_key():
	assert memory_key("mr", "Good morning") == "mr::Good morning"
