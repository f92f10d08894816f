from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple


class Positioning(str, Enum):
	PREMIUM = "premium"
	COMPARABLE = "comparable"
	BUDGET = "budget"

	@classmethod
	def normalize(cls, value) -> "Positioning":
		"""Map any raw positioning value onto the enum, defaulting to comparable."""
		if isinstance(value, Positioning):
			return value
		normalized = str(value or "").strip().lower()
		for member in cls:
			if member.value == normalized:
				return member
		return cls.COMPARABLE


@dataclass(frozen=True)
class Rating:
	score: Optional[float] = None
	max_score: int = 5
	review_count: int = 0

	def to_dict(self) -> Dict[str, Any]:
		return {"score": self.score, "maxScore": self.max_score, "reviewCount": self.review_count}


@dataclass(frozen=True)
class AlternativeProduct:
	name: str
	price: Optional[str]
	description: str

	def to_dict(self) -> Dict[str, Any]:
		return {"name": self.name, "price": self.price, "description": self.description}


@dataclass(frozen=True)
class Competitor:
	brand: str
	model: str
	key_feature: str = ""
	positioning: Positioning = Positioning.COMPARABLE
	# Only the static catalog carries real numbers; generated competitors keep zeros.
	price: float = 0
	torque: int = 0
	battery: str = ""
	warranty: str = ""

	@property
	def key(self) -> str:
		return f"{self.brand} {self.model}"

	def to_dict(self) -> Dict[str, Any]:
		return {
			"brand": self.brand,
			"model": self.model,
			"keyFeature": self.key_feature,
			"positioning": self.positioning.value,
			"price": self.price,
			"torque": self.torque,
			"battery": self.battery,
			"warranty": self.warranty,
		}


@dataclass(frozen=True)
class ProductRecord:
	"""Facts extracted from one product page.

	Built in two stages: extraction yields a record with no competitors, and
	``with_competitors`` returns the enriched copy once resolution finishes.
	"""

	name: str
	brand: str
	category: str
	tagline: str = ""
	rating: Optional[Rating] = None
	image: Optional[str] = None
	specs: Mapping[str, str] = field(default_factory=dict)
	features: Tuple[str, ...] = ()
	use_cases: Tuple[str, ...] = ()
	pros: Tuple[str, ...] = ()
	cons: Tuple[str, ...] = ()
	compatibility: Tuple[str, ...] = ()
	alternatives: Tuple[AlternativeProduct, ...] = ()
	competitors: Tuple[Competitor, ...] = ()
	price: Optional[float] = None

	def __post_init__(self) -> None:
		object.__setattr__(self, "specs", MappingProxyType(dict(self.specs)))
		for name in ("features", "use_cases", "pros", "cons", "compatibility", "alternatives", "competitors"):
			object.__setattr__(self, name, tuple(getattr(self, name)))

	def with_competitors(self, competitors) -> "ProductRecord":
		return replace(self, competitors=tuple(competitors))

	def to_dict(self) -> Dict[str, Any]:
		return {
			"name": self.name,
			"brand": self.brand,
			"category": self.category,
			"tagline": self.tagline,
			"rating": self.rating.to_dict() if self.rating else None,
			"image": self.image,
			"price": self.price,
			"specs": dict(self.specs),
			"features": list(self.features),
			"useCases": list(self.use_cases),
			"pros": list(self.pros),
			"cons": list(self.cons),
			"compatibility": list(self.compatibility),
			"alternatives": [alt.to_dict() for alt in self.alternatives],
			"competitors": [comp.to_dict() for comp in self.competitors],
		}


@dataclass(frozen=True)
class MetricComparison:
	yours: float
	average: str
	position: str

	def to_dict(self) -> Dict[str, Any]:
		return {"yours": self.yours, "average": self.average, "position": self.position}


@dataclass(frozen=True)
class NarrativeGap:
	category: str
	gap: str
	message: str

	def to_dict(self) -> Dict[str, Any]:
		return {"category": self.category, "gap": self.gap, "message": self.message}


@dataclass
class Insights:
	product: str
	competitors: List[str] = field(default_factory=list)
	comparison: Dict[str, MetricComparison] = field(default_factory=dict)
	narrative_gaps: List[NarrativeGap] = field(default_factory=list)
	competitive_position: str = ""

	def to_dict(self) -> Dict[str, Any]:
		return {
			"product": self.product,
			"competitors": list(self.competitors),
			"comparison": {name: metric.to_dict() for name, metric in self.comparison.items()},
			"narrativeGaps": [gap.to_dict() for gap in self.narrative_gaps],
			"competitivePosition": self.competitive_position,
		}


@dataclass(frozen=True)
class Profile:
	metadata: Dict[str, Any]
	structured_data: Dict[str, Any]
	narrative: str
	raw_record: ProductRecord
	insights: Optional[Insights] = None

	def to_dict(self) -> Dict[str, Any]:
		data = {
			"metadata": dict(self.metadata),
			"structuredData": self.structured_data,
			"narrative": self.narrative,
			"rawRecord": self.raw_record.to_dict(),
		}
		if self.insights is not None:
			data["insights"] = self.insights.to_dict()
		return data
