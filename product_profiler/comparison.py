"""Deterministic competitor comparison prose and gap analysis."""
import re
from typing import Dict, List, Optional, Sequence

from .models import Competitor, Insights, MetricComparison, NarrativeGap, Positioning, ProductRecord

PREMIUM_FEATURE_WORDS = ("advanced", "premium", "enhanced", "intelligent")

EMPHASIS_KEYWORDS = {
	"durability": ["durable", "durability", "rugged", "tough", "reinforced", "metal", "protection"],
	"warranty": ["warranty", "guarantee", "lifetime", "years"],
	"usability": ["ergonomic", "comfortable", "user-friendly", "easy", "intuitive"],
	"technology": ["digital", "intelligent", "smart", "advanced", "precision"],
	"power": ["power", "torque", "performance", "motor"],
}

EMPHASIS_RATIO = 1.5


def _key_specs(record: ProductRecord, limit: int = 2) -> str:
	return ", ".join(f"{key}: {value}" for key, value in list(record.specs.items())[:limit])


def _premium_text(record: ProductRecord, competitor: Competitor) -> str:
	key_specs = _key_specs(record)
	if key_specs:
		text = f"{record.brand} delivers strong performance with {key_specs}. "
	else:
		text = f"{record.brand} delivers strong, reliable performance. "

	if len(record.compatibility) > 5:
		text += f"Offers excellent ecosystem compatibility with {len(record.compatibility)}+ compatible products. "

	if competitor.key_feature:
		text += (
			f"While {competitor.brand} focuses on {competitor.key_feature}, "
			f"{record.brand} provides a well-rounded solution ideal for most users."
		)
	else:
		text += "Ideal for users who need reliable performance without premium-tier features."
	return text


def _comparable_text(record: ProductRecord, competitor: Competitor) -> str:
	text = f"Comparable to {competitor.brand} in core functionality. "

	if len(record.compatibility) > 10:
		text += f"{record.brand} offers broader ecosystem with {len(record.compatibility)}+ compatible products. "

	warranty = record.specs.get("warranty")
	if warranty and "5" in warranty:
		text += f"Provides superior {warranty} warranty coverage. "

	if len(record.features) > 5:
		text += f"Features include: {', '.join(record.features[:2])}."
	else:
		text += "Delivers reliable performance for intended use cases."
	return text


def _budget_text(record: ProductRecord, competitor: Competitor) -> str:
	text = f"Compared to budget-oriented {competitor.brand}, {record.brand} provides "

	standout = next(
		(f for f in record.features if any(word in f.lower() for word in PREMIUM_FEATURE_WORDS)),
		None,
	)
	text += f"{standout.lower()}. " if standout else "enhanced capabilities and features. "

	warranty = record.specs.get("warranty")
	if warranty:
		text += f"Includes {warranty} warranty. "

	text += "Worthwhile upgrade for users needing additional features and reliability."
	return text


_COMPARISON_BRANCHES = {
	Positioning.PREMIUM: _premium_text,
	Positioning.COMPARABLE: _comparable_text,
	Positioning.BUDGET: _budget_text,
}


def compare_text(record: ProductRecord, competitor: Competitor) -> str:
	"""Prose positioning ``record`` against one competitor, chosen by the competitor's tier."""
	return _COMPARISON_BRANCHES[Positioning.normalize(competitor.positioning)](record, competitor)


def build_comparison_map(record: ProductRecord, competitors: Optional[Sequence[Competitor]] = None) -> Dict[str, str]:
	"""One entry per competitor keyed by ``"{brand} {model}"``, in resolution order."""
	if competitors is None:
		competitors = record.competitors
	return {competitor.key: compare_text(record, competitor) for competitor in competitors}


def competitor_clause(record: ProductRecord) -> str:
	"""Narrative sentence contrasting the record with its first competitor."""
	if not record.competitors:
		return ""

	main = record.competitors[0]
	positioning = Positioning.normalize(main.positioning)
	clause = f"Compared to the {main.key}, "

	if positioning is Positioning.PREMIUM:
		feature_list = " and ".join(f.lower() for f in record.features[:2])
		if feature_list:
			clause += f"the {record.brand} offers strong performance with key features including {feature_list}. "
		else:
			clause += f"the {record.brand} offers strong, reliable performance. "
		if len(record.compatibility) > 5:
			clause += f"Provides excellent ecosystem compatibility with {len(record.compatibility)}+ products. "
	elif positioning is Positioning.COMPARABLE:
		clause += "both products offer similar capabilities. "
		if len(record.compatibility) > 10:
			clause += (
				f"The {record.brand} features broader ecosystem support with "
				f"{len(record.compatibility)}+ compatible products. "
			)
	else:
		clause += f"the {record.brand} provides enhanced features and capabilities for users needing additional functionality. "
	return clause


# --- gap analysis ---------------------------------------------------------

def _mentions(features: Sequence[str], keywords: List[str]) -> int:
	return sum(1 for f in features if any(k in f.lower() for k in keywords))


def find_narrative_gaps(record: ProductRecord, competitor_records: Sequence[ProductRecord]) -> List[NarrativeGap]:
	if not competitor_records:
		return []

	competitor_features = [f for comp in competitor_records for f in comp.features]
	gaps: List[NarrativeGap] = []
	for category, keywords in EMPHASIS_KEYWORDS.items():
		competitor_avg = _mentions(competitor_features, keywords) / len(competitor_records)
		yours = _mentions(record.features, keywords)

		if competitor_avg > yours * EMPHASIS_RATIO:
			gaps.append(NarrativeGap(
				category=category,
				gap="under-emphasized",
				message=f"Competitors emphasize {category} {competitor_avg:.1f}x more than your product description",
			))
		elif yours > competitor_avg * EMPHASIS_RATIO:
			if competitor_avg:
				message = f"You emphasize {category} {yours / competitor_avg:.1f}x more than competitors, good differentiation"
			else:
				message = f"You emphasize {category} while competitors do not mention it, good differentiation"
			gaps.append(NarrativeGap(category=category, gap="over-emphasized", message=message))
	return gaps


def _torque(record: ProductRecord) -> int:
	match = re.match(r"\s*(\d+)", record.specs.get("max_torque", ""))
	return int(match.group(1)) if match else 0


def analyze_competitors(record: ProductRecord, competitor_records: Sequence[ProductRecord]) -> Insights:
	"""Compare ``record`` with fully extracted competitor records.

	Metrics are only reported when both sides carry the value; price in
	particular is optional on every record.
	"""
	insights = Insights(product=record.name, competitors=[c.name for c in competitor_records])

	competitor_prices = [c.price for c in competitor_records if c.price is not None]
	if record.price is not None and competitor_prices:
		prices = [record.price] + competitor_prices
		avg_price = sum(prices) / len(prices)
		insights.comparison["price"] = MetricComparison(
			yours=record.price,
			average=f"{avg_price:.2f}",
			position="below market" if record.price < avg_price else "above market",
		)

	competitor_torques = [t for t in (_torque(c) for c in competitor_records) if t > 0]
	main_torque = _torque(record)
	if competitor_torques and main_torque > 0:
		avg_torque = sum(competitor_torques) / len(competitor_torques)
		insights.comparison["torque"] = MetricComparison(
			yours=main_torque,
			average=f"{avg_torque:.0f}",
			position="above average" if main_torque > avg_torque else "below average",
		)

	if record.rating and record.rating.score is not None:
		competitor_ratings = [
			c.rating.score for c in competitor_records if c.rating and c.rating.score is not None
		]
		if competitor_ratings:
			avg_rating = sum(competitor_ratings) / len(competitor_ratings)
			insights.comparison["rating"] = MetricComparison(
				yours=record.rating.score,
				average=f"{avg_rating:.2f}",
				position="above average" if record.rating.score > avg_rating else "below average",
			)

	insights.narrative_gaps = find_narrative_gaps(record, competitor_records)

	total = len(insights.comparison)
	above = sum(1 for metric in insights.comparison.values() if "above" in metric.position)
	share = above / total if total else 0.5
	if share > 0.6:
		insights.competitive_position = "Premium positioning: stronger specs but higher price"
	elif share < 0.4:
		insights.competitive_position = "Value positioning: competitive price with acceptable specs"
	else:
		insights.competitive_position = "Balanced positioning: mid-range across key metrics"
	return insights
