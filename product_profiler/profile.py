from datetime import datetime, timezone
from typing import Optional, Sequence

from .cache import FileCache
from .comparison import analyze_competitors, build_comparison_map
from .competitors import CompetitorResolver, StaticCatalog
from .config import Settings
from .document import ProductDocument
from .extractors import extract_product_record
from .llm import OpenAICompletionClient
from .log import log_info, log_warn
from .models import Profile
from .narrative import NarrativeSynthesizer
from .structured_data import build_structured_data

PROFILE_VERSION = "1.0.0"


class ProfileGenerator:
	"""Runs extraction, competitor resolution, narrative and structured data in sequence."""

	def __init__(
		self,
		client=None,
		catalog: Optional[StaticCatalog] = None,
		cache: Optional[FileCache] = None,
		use_ai: bool = True,
	) -> None:
		self.client = client
		# Capability probe runs once per generator
		self.use_ai = bool(use_ai and client is not None and client.is_available())
		if use_ai and not self.use_ai:
			log_warn("OpenAI not configured, will use static catalog and template narrative")
		self.resolver = CompetitorResolver(client, catalog, cache, self.use_ai)
		self.synthesizer = NarrativeSynthesizer(client, cache, self.use_ai)

	@classmethod
	def from_settings(cls, settings: Settings, catalog: Optional[StaticCatalog] = None) -> "ProfileGenerator":
		client = OpenAICompletionClient(settings.api_key, settings.model, settings.timeout)
		cache = FileCache(settings.cache_dir, settings.cache_ttl, enabled=settings.cache_enabled)
		return cls(client=client, catalog=catalog, cache=cache, use_ai=settings.use_ai)

	async def generate(
		self,
		document: ProductDocument,
		compare_documents: Optional[Sequence[ProductDocument]] = None,
	) -> Profile:
		record = extract_product_record(document)
		log_info(f"Extracted product: {record.name} ({record.brand})")

		competitors = await self.resolver.resolve(record)
		record = record.with_competitors(competitors)
		log_info(f"Loaded {len(record.competitors)} competitors")

		comparison = build_comparison_map(record)
		structured_data = build_structured_data(record, comparison)
		narrative = await self.synthesizer.synthesize(record)

		insights = None
		if compare_documents:
			competitor_records = [extract_product_record(doc) for doc in compare_documents]
			insights = analyze_competitors(record, competitor_records)

		return Profile(
			metadata={
				"generatedAt": datetime.now(timezone.utc).isoformat(),
				"version": PROFILE_VERSION,
				"aiPowered": self.use_ai,
			},
			structured_data=structured_data,
			narrative=narrative,
			raw_record=record,
			insights=insights,
		)
