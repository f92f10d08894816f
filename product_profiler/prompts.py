from typing import Iterable, Mapping

COMPETITOR_SYSTEM_PROMPT = (
	"You are a product market analyst with expertise across all product categories including consumer "
	"electronics, hardware, software, home goods, fashion, and more. You have deep knowledge of current "
	"products, market trends, and competitive positioning. Provide accurate, real product information."
)

NARRATIVE_SYSTEM_PROMPT = (
	"You are an expert product writer. Write directly to the shopper in the second person (\"you\"), in a "
	"conversational, helpful tone. Produce a 250-350 word product narrative grounded ONLY in the facts "
	"provided. Do not invent specifications, prices or claims. Focus on capabilities, features and who the "
	"product is for, not on pricing."
)


def format_specs(specs: Mapping[str, str], limit: int = 5, bullet: str = "") -> str:
	return "\n".join(
		f"{bullet}{key.replace('_', ' ')}: {value}" for key, value in list(specs.items())[:limit]
	)


def format_features(features: Iterable[str], limit: int = 10) -> str:
	return "\n".join(f"- {feature}" for feature in list(features)[:limit])


def build_competitor_prompt(record) -> str:
	category = record.category or "product"
	key_specs = format_specs(record.specs)
	return (
		f"Identify 3 real competing {category} products from different brands for this product:\n\n"
		f"Product: {record.name}\n"
		f"Brand: {record.brand or 'N/A'}\n"
		f"Category: {category}\n\n"
		f"Key Specifications:\n{key_specs or 'N/A'}\n\n"
		"Return ONLY valid JSON in this exact format (no markdown, no explanation):\n"
		"{\n"
		'  "competitors": [\n'
		"    {\n"
		'      "brand": "string (different brand name)",\n'
		'      "model": "string (specific model number/name)",\n'
		'      "keyFeature": "string (main differentiating feature)",\n'
		'      "positioning": "string (premium/comparable/budget relative to the product)"\n'
		"    }\n"
		"  ]\n"
		"}\n\n"
		"Rules:\n"
		"- Only include real, currently available products\n"
		"- Different brands for each competitor\n"
		"- Mix of market positions (one premium, one comparable, one budget-oriented)\n"
		"- No fictional products\n"
		"- Focus on feature differences, not pricing"
	)


def build_narrative_prompt(record) -> str:
	user_parts = [
		"Write the product narrative for the following product.",
		"",
		f"Product Name: {record.name}",
		f"Brand: {record.brand}",
		f"Category: {record.category}",
		"",
		"Key Specifications:",
		format_specs(record.specs, bullet="- ") or "N/A",
		"",
		"Key Features:",
		format_features(record.features) or "N/A",
	]
	if record.rating and record.rating.score is not None:
		rating = record.rating
		user_parts.append("")
		user_parts.append(f"Customer Rating: {rating.score}/{rating.max_score} from {rating.review_count} reviews")
	if record.tagline:
		user_parts.append("")
		user_parts.append(f"Product Tagline: {record.tagline}")
	user_parts.append("")
	user_parts.append("Speak to the reader as \"you\", explain what the product does, which specifications matter, "
		"and who it is ideal for. Keep it between 250 and 350 words.")
	return "\n".join(user_parts)
