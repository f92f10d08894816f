from product_profiler.models import AlternativeProduct, ProductRecord, Rating
from product_profiler.structured_data import build_structured_data, spec_label


def make_record(**kwargs):
	defaults = {"name": "PowerMax ProDrill 2000X", "brand": "PowerMax", "category": "Drills", "tagline": "Pro drill"}
	defaults.update(kwargs)
	return ProductRecord(**defaults)


def test_aggregate_rating_absent_without_rating():
	data = build_structured_data(make_record())
	assert "aggregateRating" not in data


def test_aggregate_rating_absent_when_score_missing():
	data = build_structured_data(make_record(rating=Rating(None, 5, 12)))
	assert "aggregateRating" not in data


def test_aggregate_rating_present():
	data = build_structured_data(make_record(rating=Rating(4.6, 5, 1204)))
	assert data["aggregateRating"] == {
		"@type": "AggregateRating",
		"ratingValue": 4.6,
		"bestRating": 5,
		"reviewCount": 1204,
	}


def test_specs_become_titled_property_values_in_order():
	data = build_structured_data(make_record(specs={"max_torque": "650", "battery_voltage": "20V"}))
	assert data["additionalProperty"] == [
		{"@type": "PropertyValue", "name": "Max Torque", "value": "650"},
		{"@type": "PropertyValue", "name": "Battery Voltage", "value": "20V"},
	]
	assert spec_label("weight_lbs_") == "Weight Lbs "


def test_identity_and_related_products():
	record = make_record(
		alternatives=[AlternativeProduct("Impact Driver", "$99.00", "Compact")],
		compatibility=["20V battery"],
	)
	data = build_structured_data(record)
	assert data["@context"] == "https://schema.org"
	assert data["@type"] == "Product"
	assert data["name"] == "PowerMax ProDrill 2000X"
	assert data["description"] == "Pro drill"
	assert data["brand"] == {"@type": "Brand", "name": "PowerMax"}
	assert data["offers"] == {"@type": "Offer", "availability": "https://schema.org/InStock"}
	assert data["isCompatibleWith"] == ["20V battery"]
	assert data["isRelatedTo"][0]["offers"] == {"@type": "Offer", "price": "$99.00"}


def test_competitor_comparison_only_when_non_empty():
	assert "competitor_comparison" not in build_structured_data(make_record(), {})
	data = build_structured_data(make_record(), {"Bosch GSR": "Comparable to Bosch in core functionality."})
	assert data["competitor_comparison"] == {"Bosch GSR": "Comparable to Bosch in core functionality."}
