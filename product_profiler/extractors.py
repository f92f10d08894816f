"""Per-field extractors that recover product facts from a parsed page.

Each extractor is a pure function of a ``ProductDocument`` and always
returns a value: a terminal default is used when every strategy misses.
"""
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence

from bs4 import Tag

from .document import ProductDocument
from .log import log_info, log_warn
from .models import AlternativeProduct, ProductRecord, Rating

UNKNOWN_PRODUCT = "Unknown Product"
UNKNOWN_BRAND = "Unknown"
DEFAULT_CATEGORY = "General Product"
MAX_FEATURES = 10

PROMOTIONAL_PHRASES = ("all-new", "introducing", "shop now", "buy now")

PRODUCT_NAME_SELECTORS = [
	'[itemprop="name"]',  # Schema.org markup
	".pdp-name",
	".product-title",
	"#productTitle",
	".product-info h1",
	'h1[class*="product"]',
	"h1.title",
	"[data-product-name]",
]

FEATURE_SELECTORS = [
	".features-list li",
	".features li",
	'[class*="feature"] li',
	".product-features li",
	".highlights li",
	'[class*="benefit"] li',
]

SPEC_ROW_SELECTOR = 'table tr, [class*="spec"] tr, [class*="specification"] tr'


@dataclass
class FieldStrategy:
	"""One step of a fallback chain: a candidate source plus its validator."""

	name: str
	candidates: Callable[[ProductDocument], Iterable[str]]
	validate: Callable[[str], bool]


def first_accepted(doc: ProductDocument, strategies: Sequence[FieldStrategy], default, field_name: str = "field"):
	"""Return the first candidate accepted by its strategy's validator.

	Strategies are consulted in order and short-circuit: later strategies are
	never run once one of them yields an accepted value.
	"""
	for strategy in strategies:
		for candidate in strategy.candidates(doc):
			if candidate and strategy.validate(candidate):
				log_info(f"Found {field_name} via {strategy.name}: {candidate}")
				return candidate
	log_warn(f"Could not find {field_name}, using default")
	return default


def _text(element: Optional[Tag]) -> str:
	return element.get_text().strip() if element is not None else ""


def extract_text(doc: ProductDocument, selector: str) -> str:
	return _text(doc.soup.select_one(selector))


def extract_meta_content(doc: ProductDocument, selector: str) -> str:
	element = doc.soup.select_one(selector)
	if element is None:
		return ""
	return (element.get("content") or "").strip()


def extract_list_items(doc: ProductDocument, selector: str) -> List[str]:
	return [_text(item) for item in doc.soup.select(selector)]


# --- name ---------------------------------------------------------------

def is_valid_product_name(text: str) -> bool:
	if not text or len(text) < 2 or len(text) > 200:
		return False
	lower = text.lower()
	if lower.startswith("the new"):
		return False
	return not any(phrase in lower for phrase in PROMOTIONAL_PHRASES)


def clean_title(title: str) -> str:
	"""Strip trailing ``| Suffix`` and ``- Suffix`` segments from a page title."""
	cleaned = re.sub(r"\s*\|\s*.+$", "", title)
	cleaned = re.sub(r"\s*-\s*.+$", "", cleaned)
	return cleaned.strip()


def _is_valid_cleaned_title(text: str) -> bool:
	return 2 < len(text) < 200 and "home" not in text.lower()


def _url_matched_names(doc: ProductDocument) -> Iterator[str]:
	url_path = doc.location_path
	if not url_path:
		return
	bare_path = url_path.split("?")[0]
	for element in doc.soup.select(".product-name"):
		link = element if element.name == "a" else element.find_parent("a")
		href = link.get("href") if link is not None else None
		if not href:
			continue
		if href == url_path or href in url_path or bare_path in href:
			yield _text(element)


def _selector_names(doc: ProductDocument) -> Iterator[str]:
	for selector in PRODUCT_NAME_SELECTORS:
		yield extract_text(doc, selector)


def _first_product_name(doc: ProductDocument) -> Iterator[str]:
	yield extract_text(doc, ".product-name")


def _og_title(doc: ProductDocument) -> Iterator[str]:
	og_title = extract_meta_content(doc, 'meta[property="og:title"]')
	if og_title and len(og_title) < 200:
		yield clean_title(og_title)


def _document_title(doc: ProductDocument) -> Iterator[str]:
	title = extract_text(doc, "title")
	if title:
		yield clean_title(title)


def _headings(doc: ProductDocument) -> Iterator[str]:
	for tag in ("h1", "h2"):
		for heading in doc.soup.find_all(tag):
			yield _text(heading)


NAME_STRATEGIES = [
	FieldStrategy("URL-matching .product-name", _url_matched_names, is_valid_product_name),
	FieldStrategy("product title selectors", _selector_names, is_valid_product_name),
	FieldStrategy("first .product-name", _first_product_name, is_valid_product_name),
	FieldStrategy("og:title", _og_title, _is_valid_cleaned_title),
	FieldStrategy("title", _document_title, _is_valid_cleaned_title),
	FieldStrategy("h1/h2", _headings, is_valid_product_name),
]


def extract_product_name(doc: ProductDocument) -> str:
	return first_accepted(doc, NAME_STRATEGIES, UNKNOWN_PRODUCT, "product name")


# --- brand, category, tagline --------------------------------------------

def extract_brand(doc: ProductDocument) -> str:
	"""Brand is the leading word of the page's first H1."""
	match = re.match(r"^(\w+)", extract_text(doc, "h1"), re.ASCII)
	return match.group(1) if match else UNKNOWN_BRAND


def extract_category(doc: ProductDocument) -> str:
	breadcrumbs = doc.soup.select('[class*="breadcrumb"] a, nav a')
	if len(breadcrumbs) > 1:
		categories = [_text(b) for b in breadcrumbs]
		categories = [c for c in categories if c and c.lower() != "home"]
		if categories:
			return " > ".join(categories)

	meta_category = extract_meta_content(doc, 'meta[property="product:category"]')
	if meta_category:
		return meta_category

	return DEFAULT_CATEGORY


def extract_tagline(doc: ProductDocument) -> str:
	return (
		extract_meta_content(doc, 'meta[name="description"]')
		or extract_meta_content(doc, 'meta[property="og:description"]')
		or extract_text(doc, ".product-tagline")
		or ""
	)


# --- rating, image, price -------------------------------------------------

def extract_rating(doc: ProductDocument) -> Optional[Rating]:
	element = (
		doc.soup.select_one(".rating")
		or doc.soup.select_one('[class*="rating"]')
		or doc.soup.select_one('[itemprop="ratingValue"]')
	)
	if element is None:
		return None

	text = element.get_text()
	rating_match = re.search(r"(\d+\.?\d*)\s*/\s*(\d+)", text)
	review_match = re.search(r"\(([0-9,]+)\s*reviews?\)", text)
	return Rating(
		score=float(rating_match.group(1)) if rating_match else None,
		max_score=int(rating_match.group(2)) if rating_match else 5,
		review_count=int(review_match.group(1).replace(",", "")) if review_match else 0,
	)


def extract_image(doc: ProductDocument) -> Optional[str]:
	element = (
		doc.soup.select_one(".product-image img")
		or doc.soup.select_one('[class*="product"] img')
		or doc.soup.select_one('meta[property="og:image"]')
		or doc.soup.select_one('img[itemprop="image"]')
	)
	if element is None:
		return None
	return element.get("src") or element.get("content") or _text(element) or None


def _parse_price(value: str) -> Optional[float]:
	match = re.search(r"\d[\d,]*(?:\.\d+)?", value or "")
	if not match:
		return None
	try:
		return float(match.group(0).replace(",", ""))
	except ValueError:
		return None


def extract_price(doc: ProductDocument) -> Optional[float]:
	"""Optional list price; ``None`` whenever the page does not state one."""
	meta_price = extract_meta_content(doc, 'meta[property="product:price:amount"]')
	if meta_price:
		return _parse_price(meta_price)

	element = doc.soup.select_one('[itemprop="price"]')
	if element is not None:
		return _parse_price(element.get("content") or _text(element))

	for element in doc.soup.select('[class*="price"]'):
		match = re.search(r"\$([0-9,]+(?:\.\d+)?)", element.get_text())
		if match:
			return _parse_price(match.group(1))
	return None


# --- specs ----------------------------------------------------------------

def extract_specs(doc: ProductDocument) -> Dict[str, str]:
	"""Collect spec label/value pairs from spec cards, tables and definition lists.

	All three sources run; on a key collision the later source overwrites, so
	definition lists win over tables, which win over spec cards.
	"""
	specs: Dict[str, str] = {}

	for card in doc.soup.select(".spec-card"):
		label = _text(card.select_one("h3"))
		value = _text(card.select_one("p"))
		if label and value:
			specs[re.sub(r"\s+", "_", label.lower())] = value

	for row in doc.soup.select(SPEC_ROW_SELECTOR):
		cells = row.select("td, th")
		if len(cells) < 2:
			continue
		label = _text(cells[0])
		value = _text(cells[1])
		if label and value and label != value:
			key = re.sub(r"_+", "_", re.sub(r"[\s\[\]]", "_", label.lower()))
			specs[key] = value

	for dt in doc.soup.select("dl dt"):
		dd = dt.find_next_sibling()
		if dd is None or dd.name != "dd":
			continue
		label = _text(dt)
		value = _text(dd)
		if label and value:
			specs[re.sub(r"\s+", "_", label.lower())] = value

	return specs


# --- features and simple lists -------------------------------------------

def _is_feature_length(text: str) -> bool:
	return 10 < len(text) < 500


def extract_features(doc: ProductDocument) -> List[str]:
	features: List[str] = []

	for selector in FEATURE_SELECTORS:
		items = doc.soup.select(selector)
		if not items:
			continue
		features = [t for t in (_text(item) for item in items) if _is_feature_length(t)]
		if features:
			break

	# Fallback: bullet points in "additional details" style containers
	if not features:
		for container in doc.soup.select('[class*="additional"], [class*="detail"]'):
			for bullet in container.select("li"):
				text = _text(bullet)
				if _is_feature_length(text) and "©" not in text:
					features.append(text)

	return list(dict.fromkeys(features))[:MAX_FEATURES]


def extract_compatibility(doc: ProductDocument) -> List[str]:
	return extract_list_items(doc, ".compatibility-item")


def extract_alternatives(doc: ProductDocument) -> List[AlternativeProduct]:
	section = doc.soup.select_one(".section:last-child")
	if section is None:
		return []

	alternatives: List[AlternativeProduct] = []
	for paragraph in section.select("p"):
		text = paragraph.get_text()
		name_match = re.match(r"^([^:]+):", text)
		if not name_match:
			continue
		price_match = re.search(r"\$([0-9,.]+)", text)
		alternatives.append(
			AlternativeProduct(
				name=name_match.group(1).strip(),
				price=f"${price_match.group(1)}" if price_match else None,
				description=text[text.index(":") + 1:].strip(),
			)
		)
	return alternatives


# --- assembler ------------------------------------------------------------

def extract_product_record(doc: ProductDocument) -> ProductRecord:
	"""Run every field extractor and assemble the extracted-stage record."""
	log_info(f"Page URL path: {doc.location_path or '(none)'}")
	return ProductRecord(
		name=extract_product_name(doc),
		brand=extract_brand(doc),
		category=extract_category(doc),
		tagline=extract_tagline(doc),
		rating=extract_rating(doc),
		image=extract_image(doc),
		price=extract_price(doc),
		specs=extract_specs(doc),
		features=extract_features(doc),
		use_cases=extract_list_items(doc, ".use-cases-list li"),
		pros=extract_list_items(doc, ".pros ul li"),
		cons=extract_list_items(doc, ".cons ul li"),
		compatibility=extract_compatibility(doc),
		alternatives=extract_alternatives(doc),
	)
