import asyncio
import json

import pytest

from conftest import FakeClient
from product_profiler.cache import FileCache, cache_key
from product_profiler.competitors import (
	CompetitorResolver,
	StaticCatalog,
	normalize_competitors,
	parse_competitor_response,
)
from product_profiler.llm import GenerationUnavailable
from product_profiler.models import Positioning, ProductRecord


def make_record(name="PowerMax ProDrill 2000X"):
	return ProductRecord(name=name, brand="PowerMax", category="Drills", specs={"max_torque": "650 in-lbs"})


@pytest.mark.parametrize("raw", ["luxury", "", None, "PREMIUMISH", 5])
def test_unknown_positioning_normalizes_to_comparable(raw):
	assert Positioning.normalize(raw) is Positioning.COMPARABLE


def test_positioning_is_case_insensitive():
	assert Positioning.normalize("Premium") is Positioning.PREMIUM
	assert Positioning.normalize(" budget ") is Positioning.BUDGET


def test_normalize_generated_competitors_defaults():
	competitors = normalize_competitors([
		{"brand": "DeWalt", "model": "DCD999", "keyFeature": "Flexvolt", "positioning": "PREMIUM", "price": 299},
		{"positioning": "odd"},
		"not a dict",
	])
	assert len(competitors) == 2
	assert competitors[0].positioning is Positioning.PREMIUM
	assert competitors[0].price == 0
	assert competitors[0].torque == 0
	assert competitors[1].brand == "Unknown"
	assert competitors[1].model == ""
	assert competitors[1].key_feature == ""
	assert competitors[1].positioning is Positioning.COMPARABLE


def test_parse_competitor_response_rejects_bad_shapes():
	with pytest.raises(GenerationUnavailable):
		parse_competitor_response("not json")
	with pytest.raises(GenerationUnavailable):
		parse_competitor_response(json.dumps({"competitors": "nope"}))
	assert parse_competitor_response("{}") == []


def test_static_catalog_keeps_numeric_fields():
	competitors = StaticCatalog().lookup("PowerMax ProDrill 2000X")
	assert [c.key for c in competitors] == ["TitanForce MegaDrill Pro 3000", "Milwaukee M18 Compact Drill"]
	assert competitors[0].price == 249.99
	assert competitors[0].torque == 820
	assert competitors[0].positioning is Positioning.PREMIUM


def test_static_catalog_miss_is_empty():
	assert StaticCatalog().lookup("powermax prodrill 2000x") == []
	assert StaticCatalog({}).lookup("PowerMax ProDrill 2000X") == []


def test_resolver_uses_generated_competitors():
	payload = json.dumps({"competitors": [
		{"brand": "Makita", "model": "XFD131", "keyFeature": "compact body", "positioning": "budget"},
	]})
	client = FakeClient(responses=[payload])
	competitors = asyncio.run(CompetitorResolver(client).resolve(make_record()))
	assert [c.key for c in competitors] == ["Makita XFD131"]
	assert competitors[0].positioning is Positioning.BUDGET
	assert client.calls[0]["json_mode"] is True
	assert "max torque: 650 in-lbs" in client.calls[0]["user"]


def test_resolver_falls_back_to_injected_catalog():
	catalog = StaticCatalog({"PowerMax ProDrill 2000X": [{"brand": "Bosch", "model": "GSR18", "positioning": "premium", "price": 199}]})
	client = FakeClient(error=GenerationUnavailable("HTTP 500"))
	competitors = asyncio.run(CompetitorResolver(client, catalog).resolve(make_record()))
	assert [c.key for c in competitors] == ["Bosch GSR18"]
	assert competitors[0].price == 199


def test_resolver_malformed_response_falls_back():
	client = FakeClient(responses=["{not json"])
	competitors = asyncio.run(CompetitorResolver(client).resolve(make_record()))
	assert [c.brand for c in competitors] == ["TitanForce", "Milwaukee"]


def test_resolver_without_client_uses_catalog():
	assert asyncio.run(CompetitorResolver(None).resolve(make_record("Unlisted"))) == []


def test_resolver_caches_generated_result(tmp_path):
	payload = json.dumps({"competitors": [{"brand": "Makita", "model": "XFD131", "positioning": "premium"}]})
	client = FakeClient(responses=[payload])
	resolver = CompetitorResolver(client, cache=FileCache(str(tmp_path)))

	first = asyncio.run(resolver.resolve(make_record()))
	second = asyncio.run(resolver.resolve(make_record()))
	assert first == second
	assert len(client.calls) == 1


def test_resolver_ignores_wrongly_shaped_cache_entry(tmp_path):
	cache = FileCache(str(tmp_path))
	record = make_record()
	with open(cache._path(cache_key("competitors", record.name, record.brand)), "w", encoding="utf-8") as f:
		json.dump([1, 2], f)

	payload = json.dumps({"competitors": [{"brand": "Makita", "model": "XFD131", "positioning": "budget"}]})
	client = FakeClient(responses=[payload])
	competitors = asyncio.run(CompetitorResolver(client, cache=cache).resolve(record))
	assert [c.key for c in competitors] == ["Makita XFD131"]
	assert len(client.calls) == 1
