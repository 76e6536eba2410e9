import asyncio

import httpx

from edubridge.backends import TranslationBackend
from edubridge.cache import TranslationCache
from edubridge.keys import hash_key
from edubridge.translator import DEFAULT_UI_PHRASES, Translator


def test_second_translation_is_served_from_cache(make_translator, cache):
	translator, backend = make_translator({("hi", "Hello"): "नमस्ते"})

	first = asyncio.run(translator.translate_batch(["Hello"], "hi"))
	assert cache.tier_of("hi", "Hello") == "memory"
	second = asyncio.run(translator.translate_batch(["Hello"], "hi"))

	assert first == second == ["नमस्ते"]
	assert len(backend.invoke_calls) == 1


def test_batch_preserves_order_across_hits_and_misses(make_translator, cache):
	translator, backend = make_translator({("hi", "b"): "B"})
	asyncio.run(cache.persist("hi", [("a", "A"), ("c", "C")]))

	assert asyncio.run(translator.translate_batch(["a", "b", "c"], "hi")) == ["A", "B", "C"]
	assert backend.invoke_calls == [(["b"], "hi")]


def test_english_target_is_a_no_op(make_translator):
	translator, backend = make_translator()
	assert asyncio.run(translator.translate_batch(["Hello"], "en")) == ["Hello"]
	assert asyncio.run(translator.translate_batch(["Hello"], "English")) == ["Hello"]
	assert backend.invoke_calls == []


def test_empty_batch(make_translator):
	translator, backend = make_translator()
	assert asyncio.run(translator.translate_batch([], "hi")) == []
	assert backend.invoke_calls == []


def test_failed_items_pass_through_and_are_not_cached(make_translator, cache, remote):
	translator, backend = make_translator({("hi", "Hello"): "नमस्ते"})

	out = asyncio.run(translator.translate_batch(["Hello", "Ping"], "hi"))
	assert out == ["नमस्ते", "Ping"]
	assert cache.lookup("hi", "Ping") is None
	assert hash_key("Ping") not in remote.documents["hi"]


def test_duplicate_misses_are_requested_once(make_translator):
	translator, backend = make_translator({("hi", "Next"): "अगला"})
	out = asyncio.run(translator.translate_batch(["Next", "Next"], "hi"))
	assert out == ["अगला", "अगला"]
	assert backend.invoke_calls == [(["Next"], "hi")]


def test_network_failure_passes_through_original_text():
	def handler(request):
		raise httpx.ConnectError("offline", request=request)

	async def scenario():
		client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
		backend = TranslationBackend(
			proxy_url="http://portal.test/api/translate",
			libretranslate_url="https://lt.test/translate",
			client=client,
		)
		translator = Translator(TranslationCache(), backend)
		try:
			return (
				await translator.translate_batch(["Ping"], "hi"),
				await translator.translate_from_english("Ping", "hi"),
			)
		finally:
			await client.aclose()

	assert asyncio.run(scenario()) == (["Ping"], "Ping")


def test_end_to_end_marathi(make_translator, cache, local, remote):
	translator, backend = make_translator({("mr", "Good morning"): "सुप्रभात"})

	out = asyncio.run(translator.translate_batch(["Good morning"], "Marathi"))

	assert out == ["सुप्रभात"]
	assert backend.invoke_calls == [(["Good morning"], "mr")]
	assert cache.memory.get("mr::Good morning") == "सुप्रभात"
	assert local.get("mr::Good morning") == "सुप्रभात"
	assert remote.documents["mr"][hash_key("Good morning")] == {"s": "Good morning", "t": "सुप्रभात"}


def test_to_english_is_cached_after_first_call(make_translator):
	translator, backend = make_translator({("en", "வணக்கம்"): "Hello"})

	assert asyncio.run(translator.translate_to_english("வணக்கம்", "ta")) == "Hello"
	assert asyncio.run(translator.translate_to_english("வணக்கம்", "ta")) == "Hello"
	assert backend.one_calls == [("வணக்கம்", "en", "ta")]


def test_from_english_uses_target_partition(make_translator, remote):
	translator, backend = make_translator({("hi", "See page 4"): "पृष्ठ 4 देखें"})

	assert asyncio.run(translator.translate_from_english("See page 4", "Hindi")) == "पृष्ठ 4 देखें"
	assert backend.one_calls == [("See page 4", "hi", "en")]
	assert hash_key("See page 4") in remote.documents["hi"]


def test_directional_helpers_short_circuit(make_translator):
	translator, backend = make_translator()
	assert asyncio.run(translator.translate_to_english("   ", "ta")) == "   "
	assert asyncio.run(translator.translate_from_english("", "hi")) == ""
	assert asyncio.run(translator.translate_to_english("Hello", "en")) == "Hello"
	assert asyncio.run(translator.translate_from_english("Hello", "english")) == "Hello"
	assert backend.one_calls == []


def test_directional_failure_passes_through(make_translator, cache):
	translator, backend = make_translator(fail=True)
	assert asyncio.run(translator.translate_to_english("வணக்கம்", "ta")) == "வணக்கம்"
	assert cache.lookup("en", "வணக்கம்") is None


def test_preload_then_batch_skips_backend(make_translator, remote):
	translator, backend = make_translator()
	remote.documents["hi"] = {hash_key("Hello"): {"s": "Hello", "t": "नमस्ते"}}

	assert asyncio.run(translator.preload_translation_cache("Hindi")) == 1
	assert asyncio.run(translator.translate_batch(["Hello"], "hi")) == ["नमस्ते"]
	assert backend.invoke_calls == []


def test_prewarm_translates_ui_phrases(make_translator, cache):
	translator, backend = make_translator({("hi", "Next"): "अगला"})
	out = asyncio.run(translator.prewarm("hi"))
	assert len(out) == len(DEFAULT_UI_PHRASES)
	assert cache.lookup("hi", "Next") == "अगला"


def test_aclose_closes_backend(make_translator):
	translator, backend = make_translator()
	asyncio.run(translator.aclose())
	assert backend.closed
