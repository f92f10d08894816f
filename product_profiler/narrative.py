from typing import Optional

from .cache import FileCache, cache_key
from .comparison import competitor_clause
from .llm import GenerationUnavailable
from .log import log_error, log_warn
from .models import ProductRecord
from .prompts import NARRATIVE_SYSTEM_PROMPT, build_narrative_prompt

MIN_WORDS = 100
MAX_WORDS = 300


def truncate_to_word_count(text: str, min_words: int, max_words: int) -> str:
	"""Cut ``text`` to ``max_words``, preferring to end on a sentence boundary.

	The boundary is only used when the last period sits past roughly
	``min_words`` worth of characters (five per word).
	"""
	words = text.split()
	if len(words) <= max_words:
		return text

	truncated = " ".join(words[:max_words])
	last_period = truncated.rfind(".")
	if last_period > min_words * 5:
		truncated = truncated[:last_period + 1]
	return truncated


def build_fallback_narrative(record: ProductRecord) -> str:
	narrative = f"The {record.name} is a {record.category.lower()} from {record.brand}. "

	if record.specs:
		spec_list = ", ".join(
			f"{key.replace('_', ' ')}: {value}" for key, value in list(record.specs.items())[:5]
		)
		narrative += f"Key specifications include {spec_list}. "

	if record.features:
		narrative += f"Notable features: {', '.join(record.features[:3])}. "

	rating = record.rating
	if rating and rating.score is not None:
		narrative += f"Customer rating: {rating.score}/{rating.max_score} from {rating.review_count:,} reviews. "

	narrative += competitor_clause(record)
	return truncate_to_word_count(narrative, MIN_WORDS, MAX_WORDS)


class NarrativeSynthesizer:
	def __init__(self, client=None, cache: Optional[FileCache] = None, use_ai: bool = True) -> None:
		self.client = client
		self.cache = cache
		self.use_ai = use_ai and client is not None

	async def generate(self, record: ProductRecord) -> str:
		key = cache_key("narrative", record.name, record.brand)
		cached = self.cache.get(key) if self.cache else None
		if cached:
			return cached

		narrative = await self.client.complete(
			NARRATIVE_SYSTEM_PROMPT,
			build_narrative_prompt(record),
			max_tokens=700,
		)
		narrative = narrative.strip()
		if self.cache:
			self.cache.set(key, narrative)
		return narrative

	async def synthesize(self, record: ProductRecord) -> str:
		if self.use_ai:
			try:
				return await self.generate(record)
			except GenerationUnavailable as exc:
				log_error(f"AI narrative generation failed: {exc}")
				log_warn("Falling back to template-based narrative")

		return build_fallback_narrative(record)
