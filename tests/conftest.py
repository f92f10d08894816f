import pytest

from product_profiler.document import parse_document


class FakeClient:
	"""Stand-in for the OpenAI collaborator."""

	def __init__(self, responses=None, error=None, available=True):
		self.responses = list(responses or [])
		self.error = error
		self.available = available
		self.calls = []

	def is_available(self):
		return self.available

	async def complete(self, system_prompt, user_prompt, max_tokens=1500, json_mode=False):
		self.calls.append({"system": system_prompt, "user": user_prompt, "max_tokens": max_tokens, "json_mode": json_mode})
		if self.error is not None:
			raise self.error
		return self.responses.pop(0)


DRILL_PAGE = """
<html>
<head>
	<title>PowerMax ProDrill 2000X | PowerMax Tools</title>
	<meta name="description" content="Professional cordless drill for demanding jobs.">
	<meta property="og:image" content="https://example.com/og.jpg">
</head>
<body>
	<nav class="breadcrumb"><a href="/">Home</a><a href="/tools">Power Tools</a><a href="/tools/drills">Drills</a></nav>
	<div class="product-info">
		<h1 class="product-title">PowerMax ProDrill 2000X</h1>
		<div class="rating">4.6 / 5 (1,204 reviews)</div>
		<div class="product-image"><img src="/img/drill.jpg"></div>
	</div>
	<div class="spec-card"><h3>Max Torque</h3><p>650 in-lbs</p></div>
	<div class="spec-card"><h3>Battery Voltage</h3><p>20V</p></div>
	<ul class="features-list">
		<li>Brushless motor for longer runtime</li>
		<li>Advanced clutch with 24 settings</li>
	</ul>
</body>
</html>
"""


@pytest.fixture
def drill_document():
	return parse_document(DRILL_PAGE, "https://example.com/products/prodrill-2000x")


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
	"""Run with no profiler env vars, no user config and tmp_path as the working directory."""
	for name in ("OPENAI_API_KEY", "PROFILER_MODEL", "PROFILER_TIMEOUT", "PROFILER_CACHE_DIR", "PROFILER_FETCH_PROXIES"):
		monkeypatch.delenv(name, raising=False)
	monkeypatch.setattr("product_profiler.config.CONFIG_FILE", str(tmp_path / "user_config.json"))
	monkeypatch.chdir(tmp_path)
	return tmp_path
