"""Product Profiler package."""

from .competitors import CompetitorResolver, StaticCatalog
from .document import ProductDocument, parse_document
from .extractors import extract_product_record
from .models import Competitor, Positioning, Profile, ProductRecord, Rating
from .narrative import NarrativeSynthesizer, truncate_to_word_count
from .profile import ProfileGenerator

__all__ = [
	"CompetitorResolver",
	"StaticCatalog",
	"ProductDocument",
	"parse_document",
	"extract_product_record",
	"Competitor",
	"Positioning",
	"Profile",
	"ProductRecord",
	"Rating",
	"NarrativeSynthesizer",
	"truncate_to_word_count",
	"ProfileGenerator",
]
