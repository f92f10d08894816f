"""Competitor resolution: generative lookup first, static catalog as fallback."""
import json
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from .cache import FileCache, cache_key
from .llm import GenerationUnavailable
from .log import log_error, log_info, log_warn
from .models import Competitor, Positioning, ProductRecord
from .prompts import COMPETITOR_SYSTEM_PROMPT, build_competitor_prompt

# Cross-brand catalog used when the generative lookup is unavailable
DEFAULT_CATALOG: Dict[str, List[Dict]] = {
	"PowerMax ProDrill 2000X": [
		{
			"brand": "TitanForce",
			"model": "MegaDrill Pro 3000",
			"price": 249.99,
			"torque": 820,
			"battery": "24V",
			"warranty": "5 Years",
			"positioning": "premium",
		},
		{
			"brand": "Milwaukee",
			"model": "M18 Compact Drill",
			"price": 179.99,
			"torque": 650,
			"battery": "18V",
			"warranty": "3 Years",
			"positioning": "comparable",
		},
	],
	"TitanForce MegaDrill Pro 3000": [
		{
			"brand": "PowerMax",
			"model": "ProDrill 2000X",
			"price": 179.99,
			"torque": 650,
			"battery": "20V",
			"warranty": "3 Years",
			"positioning": "budget",
		},
		{
			"brand": "DeWalt",
			"model": "DCD999",
			"price": 299.99,
			"torque": 1200,
			"battery": "20V MAX",
			"warranty": "3 Years",
			"positioning": "premium",
		},
	],
}


def catalog_competitor(entry: Mapping) -> Competitor:
	return Competitor(
		brand=entry.get("brand") or "Unknown",
		model=entry.get("model") or "",
		key_feature=entry.get("keyFeature") or "",
		positioning=Positioning.normalize(entry.get("positioning")),
		price=entry.get("price") or 0,
		torque=entry.get("torque") or 0,
		battery=entry.get("battery") or "",
		warranty=entry.get("warranty") or "",
	)


class StaticCatalog:
	"""Competitor lookup by exact product name."""

	def __init__(self, entries: Optional[Mapping[str, Sequence[Mapping]]] = None) -> None:
		self.entries = DEFAULT_CATALOG if entries is None else entries

	def lookup(self, product_name: str) -> List[Competitor]:
		return [catalog_competitor(entry) for entry in self.entries.get(product_name, [])]


def normalize_competitors(raw: Iterable) -> List[Competitor]:
	"""Normalize generated competitor dicts; numeric fields stay zero."""
	competitors: List[Competitor] = []
	for comp in raw:
		if not isinstance(comp, Mapping):
			continue
		competitors.append(Competitor(
			brand=comp.get("brand") or "Unknown",
			model=comp.get("model") or "",
			key_feature=comp.get("keyFeature") or "",
			positioning=Positioning.normalize(comp.get("positioning")),
			price=0,
			torque=0,
			battery=comp.get("battery") or "",
			warranty=comp.get("warranty") or "3 Years",
		))
	return competitors


def parse_competitor_response(content: str) -> List[Dict]:
	try:
		parsed = json.loads(content)
	except json.JSONDecodeError as exc:
		raise GenerationUnavailable(f"Competitor response is not JSON: {exc}") from exc
	if not isinstance(parsed, dict) or not isinstance(parsed.get("competitors", []), list):
		raise GenerationUnavailable("Competitor response has no competitors list")
	return parsed.get("competitors", [])


class CompetitorResolver:
	def __init__(self, client=None, catalog: Optional[StaticCatalog] = None, cache: Optional[FileCache] = None, use_ai: bool = True) -> None:
		self.client = client
		self.catalog = catalog or StaticCatalog()
		self.cache = cache
		self.use_ai = use_ai and client is not None

	async def generate(self, record: ProductRecord) -> List[Competitor]:
		key = cache_key("competitors", record.name, record.brand)
		cached = self.cache.get(key) if self.cache else None
		if cached is not None:
			return normalize_competitors(cached)

		content = await self.client.complete(
			COMPETITOR_SYSTEM_PROMPT,
			build_competitor_prompt(record),
			max_tokens=1500,
			json_mode=True,
		)
		competitors = normalize_competitors(parse_competitor_response(content))
		if self.cache:
			self.cache.set(key, [c.to_dict() for c in competitors])
		return competitors

	async def resolve(self, record: ProductRecord) -> List[Competitor]:
		if self.use_ai:
			try:
				log_info("Fetching competitors with AI...")
				competitors = await self.generate(record)
				log_info(f"AI found {len(competitors)} competitors")
				return competitors
			except GenerationUnavailable as exc:
				log_error(f"AI competitor lookup failed: {exc}")
				log_warn("Falling back to static catalog")

		return self.catalog.lookup(record.name)
