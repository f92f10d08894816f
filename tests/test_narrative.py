import asyncio

from conftest import FakeClient
from product_profiler.cache import FileCache
from product_profiler.llm import GenerationUnavailable
from product_profiler.models import Competitor, Positioning, ProductRecord, Rating
from product_profiler.narrative import (
	NarrativeSynthesizer,
	build_fallback_narrative,
	truncate_to_word_count,
)


def make_record(**kwargs):
	defaults = {"name": "PowerMax ProDrill 2000X", "brand": "PowerMax", "category": "Cordless Drills"}
	defaults.update(kwargs)
	return ProductRecord(**defaults)


def test_truncate_keeps_exactly_max_words():
	text = " ".join(f"word{i}" for i in range(300))
	assert truncate_to_word_count(text, 100, 300) == text


def test_truncate_cuts_to_last_sentence_boundary():
	sentence = "This sentence has exactly eight words in it. "
	text = sentence * 40  # 320 words
	result = truncate_to_word_count(text, 100, 300)
	assert len(result.split()) <= 300
	assert result.endswith(".")


def test_truncate_keeps_hard_cut_without_late_period():
	text = "Short start. " + " ".join(f"w{i}" for i in range(400))
	result = truncate_to_word_count(text, 100, 300)
	assert len(result.split()) == 300
	assert not result.endswith(".")


def test_fallback_narrative_template():
	record = make_record(
		specs={"max_torque": "650 in-lbs", "battery_voltage": "20V"},
		features=["Brushless motor", "LED work light", "Belt clip", "Carry case"],
		rating=Rating(4.6, 5, 1204),
	).with_competitors([Competitor(brand="Milwaukee", model="M18", positioning=Positioning.COMPARABLE)])

	narrative = build_fallback_narrative(record)
	assert narrative.startswith("The PowerMax ProDrill 2000X is a cordless drills from PowerMax. ")
	assert "Key specifications include max torque: 650 in-lbs, battery voltage: 20V. " in narrative
	assert "Notable features: Brushless motor, LED work light, Belt clip. " in narrative
	assert "Carry case" not in narrative
	assert "Customer rating: 4.6/5 from 1,204 reviews. " in narrative
	assert "Compared to the Milwaukee M18, both products offer similar capabilities." in narrative


def test_fallback_narrative_skips_rating_without_score():
	narrative = build_fallback_narrative(make_record(rating=Rating(None, 5, 40)))
	assert "Customer rating" not in narrative


def test_synthesizer_prefers_ai():
	client = FakeClient(responses=["  You will love this drill.  "])
	synthesizer = NarrativeSynthesizer(client)
	record = make_record(tagline="Built for pros", rating=Rating(4.6, 5, 10))

	assert asyncio.run(synthesizer.synthesize(record)) == "You will love this drill."
	call = client.calls[0]
	assert "second person" in call["system"]
	assert "Product Tagline: Built for pros" in call["user"]
	assert "Customer Rating: 4.6/5 from 10 reviews" in call["user"]
	assert call["json_mode"] is False


def test_synthesizer_falls_back_on_any_failure():
	client = FakeClient(error=GenerationUnavailable("timeout"))
	synthesizer = NarrativeSynthesizer(client)
	narrative = asyncio.run(synthesizer.synthesize(make_record()))
	assert narrative.startswith("The PowerMax ProDrill 2000X is a cordless drills from PowerMax.")


def test_synthesizer_without_ai_never_calls_client():
	client = FakeClient(responses=["unused"])
	asyncio.run(NarrativeSynthesizer(client, use_ai=False).synthesize(make_record()))
	assert client.calls == []


def test_synthesizer_uses_cache(tmp_path):
	cache = FileCache(str(tmp_path))
	client = FakeClient(responses=["First narrative."])
	synthesizer = NarrativeSynthesizer(client, cache)
	record = make_record()

	assert asyncio.run(synthesizer.synthesize(record)) == "First narrative."
	assert asyncio.run(synthesizer.synthesize(record)) == "First narrative."
	assert len(client.calls) == 1


def test_cached_narratives_are_per_product(tmp_path):
	client = FakeClient(responses=["Narrative for S23.", "Narrative for S23+."])
	synthesizer = NarrativeSynthesizer(client, FileCache(str(tmp_path)))

	plain = make_record(name="Galaxy S23", brand="Samsung")
	plus = make_record(name="Galaxy S23+", brand="Samsung")
	assert asyncio.run(synthesizer.synthesize(plain)) == "Narrative for S23."
	assert asyncio.run(synthesizer.synthesize(plus)) == "Narrative for S23+."
	assert len(client.calls) == 2
