import urllib.parse as urlparse
from typing import List, Optional

import requests

from .log import log_info, log_warn

BLOCKED_MARKERS = ("403", "forbidden", "redirect", "bot protection")


class FetchError(Exception):
	"""Markup could not be fetched; keeps the upstream status and text."""

	def __init__(self, message: str, status_code: Optional[int] = None) -> None:
		super().__init__(message)
		self.status_code = status_code

	@property
	def blocked(self) -> bool:
		if self.status_code == 403:
			return True
		text = str(self).lower()
		return any(marker in text for marker in BLOCKED_MARKERS)


def _get(url: str, session: requests.Session, timeout: int) -> str:
	try:
		resp = session.get(url, timeout=timeout)
	except requests.TooManyRedirects as exc:
		raise FetchError(f"Too many redirects (possible bot protection): {exc}") from exc
	except requests.RequestException as exc:
		raise FetchError(f"Request failed: {exc}") from exc

	if resp.status_code >= 400:
		raise FetchError(f"HTTP {resp.status_code}: {resp.text[:300]}", resp.status_code)
	# Improve encoding handling to avoid garbled characters
	if not resp.encoding or resp.encoding.lower() == "iso-8859-1":
		resp.encoding = resp.apparent_encoding or "utf-8"
	return resp.text


def fetch_markup(
	url: str,
	session: Optional[requests.Session] = None,
	timeout: int = 15,
	proxies: Optional[List[str]] = None,
) -> str:
	"""Fetch ``url`` directly, then through each fetch proxy, returning the first body."""
	session = session or requests.Session()
	attempts = [("direct", url)]
	for proxy in proxies or []:
		attempts.append((proxy, f"{proxy}?url={urlparse.quote(url, safe='')}"))

	last_error: Optional[FetchError] = None
	for name, target in attempts:
		try:
			log_info(f"Fetching {url} via {name}")
			return _get(target, session, timeout)
		except FetchError as exc:
			log_warn(f"{name} failed: {exc}")
			if last_error is None or exc.status_code is not None:
				last_error = exc
	raise last_error


def render_markup(url: str, timeout: int = 30) -> Optional[str]:
	"""Load ``url`` in headless Chromium and return the rendered DOM.

	Requires the optional ``render`` extra:
	pip install playwright && playwright install chromium --with-deps
	"""
	try:
		from playwright.sync_api import sync_playwright
	except ImportError:
		log_warn("Playwright not installed. Install with: pip install playwright && playwright install chromium --with-deps")
		return None

	try:
		with sync_playwright() as p:
			browser = p.chromium.launch(
				headless=True,
				args=["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage", "--disable-gpu"],
			)
			context = browser.new_context(viewport={"width": 1280, "height": 720})
			page = context.new_page()
			page.goto(url, wait_until="networkidle", timeout=timeout * 1000)
			html = page.content()
			context.close()
			browser.close()
			return html
	except Exception as exc:
		log_warn(f"Render failed for {url}: {exc}")
		return None
