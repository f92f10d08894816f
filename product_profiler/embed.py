import html
import json

from .models import Profile

EMBED_CSS = """.llm-optimized-product-description {
  line-height: 1.8;
  color: #333;
  font-size: 16px;
}
.product-competitive-analysis {
  margin-top: 1.5rem;
  padding: 1rem;
  background: #f8f9fa;
  border-left: 3px solid #1473e6;
  border-radius: 4px;
}
.product-competitive-analysis p {
  margin-bottom: 0.75rem;
}"""


def _json_for_script(data) -> str:
	# "</" inside a script block would close it early
	return json.dumps(data, ensure_ascii=False, indent=2).replace("</", "<\\/")


def render_embed_code(profile: Profile) -> str:
	"""HTML fragment with the JSON-LD block, the narrative and the competitor comparisons."""
	comparison = profile.structured_data.get("competitor_comparison") or {}
	competitor_html = ""
	if comparison:
		rows = "\n".join(
			f"    <p><strong>vs {html.escape(name)}:</strong> {html.escape(text)}</p>"
			for name, text in comparison.items()
		)
		competitor_html = (
			"\n\n  <!-- Competitive Analysis -->\n"
			f'  <div class="product-competitive-analysis">\n{rows}\n  </div>'
		)

	return (
		"<!-- GEO-Optimized Product Content -->\n"
		"<!-- Generated by Product Profiler -->\n\n"
		"<!-- Step 1: Add this JSON-LD script to your <head> section -->\n"
		'<script type="application/ld+json">\n'
		f"{_json_for_script(profile.structured_data)}\n"
		"</script>\n\n"
		"<!-- Step 2: Add this conversational narrative to your product description area -->\n"
		'<div class="llm-optimized-product-description" data-llm-enhanced="true">\n'
		f"  {html.escape(profile.narrative)}{competitor_html}\n"
		"</div>\n\n"
		"<!-- Optional: Add this CSS for styling -->\n"
		f"<style>\n{EMBED_CSS}\n</style>"
	)
