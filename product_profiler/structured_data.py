import re
from typing import Any, Dict, Mapping, Optional

from .models import ProductRecord


def spec_label(key: str) -> str:
	"""``battery_voltage`` -> ``Battery Voltage``."""
	return re.sub(r"\b\w", lambda m: m.group(0).upper(), key.replace("_", " "))


def build_structured_data(record: ProductRecord, comparison: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
	"""Map a record (and its comparison map) onto a schema.org Product object."""
	structured: Dict[str, Any] = {
		"@context": "https://schema.org",
		"@type": "Product",
		"name": record.name,
		"description": record.tagline,
		"brand": {
			"@type": "Brand",
			"name": record.brand,
		},
		"category": record.category,
		"offers": {
			"@type": "Offer",
			"availability": "https://schema.org/InStock",
		},
	}
	if record.image:
		structured["image"] = record.image
	if record.price is not None:
		structured["offers"]["price"] = f"{record.price:.2f}"

	# Omitted entirely, never null, when no score was extracted
	if record.rating is not None and record.rating.score is not None:
		structured["aggregateRating"] = {
			"@type": "AggregateRating",
			"ratingValue": record.rating.score,
			"bestRating": record.rating.max_score,
			"reviewCount": record.rating.review_count,
		}

	structured["additionalProperty"] = [
		{"@type": "PropertyValue", "name": spec_label(key), "value": value}
		for key, value in record.specs.items()
	]
	structured["features"] = list(record.features)
	structured["useCases"] = list(record.use_cases)
	structured["pros"] = list(record.pros)
	structured["cons"] = list(record.cons)
	structured["isCompatibleWith"] = list(record.compatibility)
	structured["isRelatedTo"] = [
		{
			"@type": "Product",
			"name": alt.name,
			"offers": {"@type": "Offer", "price": alt.price},
			"description": alt.description,
		}
		for alt in record.alternatives
	]

	if comparison:
		structured["competitor_comparison"] = dict(comparison)
	return structured
