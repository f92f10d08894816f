#!/usr/bin/env python3
"""
Web API wrapper for Product Profiler
Exposes HTTP endpoints for fetching product pages and generating profiles
"""
import asyncio
import dataclasses
import os
import threading
from datetime import datetime, timezone

import requests
from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from .config import load_settings
from .document import parse_document
from .embed import render_embed_code
from .fetcher import FetchError, fetch_markup
from .log import log_error, set_progress_callback
from .profile import ProfileGenerator

# The progress callback is process-global; one generation installs it at a time
_progress_lock = threading.Lock()


def _fetch_error_response(exc: FetchError):
	status = 403 if exc.blocked else 502
	return jsonify({
		"error": str(exc),
		"blocked": exc.blocked,
		"upstream_status": exc.status_code,
	}), status


def create_app(settings=None, generator_factory=None) -> Flask:
	settings = settings or load_settings()
	generator_factory = generator_factory or ProfileGenerator.from_settings

	app = Flask(__name__)
	CORS(app)  # Enable CORS for all routes

	def new_session() -> requests.Session:
		session = requests.Session()
		session.headers.update({"User-Agent": settings.user_agent})
		return session

	@app.route("/health", methods=["GET"])
	def health():
		"""Health check endpoint"""
		return jsonify({
			"status": "healthy",
			"service": "Product Profiler",
			"timestamp": datetime.now(timezone.utc).isoformat(),
			"openai_configured": bool(settings.api_key),
		}), 200

	@app.route("/api/fetch-url", methods=["GET"])
	def fetch_url_endpoint():
		"""Fetch a product page on behalf of a browser client and return its markup."""
		url = request.args.get("url")
		if not url:
			return jsonify({"error": "url is required"}), 400
		try:
			html = fetch_markup(url, new_session(), settings.timeout)
		except FetchError as exc:
			return _fetch_error_response(exc)
		return Response(html, mimetype="text/html")

	@app.route("/profile", methods=["POST"])
	def profile_endpoint():
		"""
		Generate a product profile.

		Request body (JSON):
		{
			"url": "https://example.com/product",  # Either url...
			"html": "<html>...</html>",            # ...or raw markup
			"page_url": "https://example.com/p",   # Optional, location of the markup
			"compare_urls": ["https://..."],       # Optional competitor pages
			"use_ai": true                         # Optional, default true
		}
		"""
		if not request.is_json:
			return jsonify({"error": "Request must be JSON"}), 400

		data = request.get_json()
		if not data.get("url") and not data.get("html"):
			return jsonify({"error": "url or html is required"}), 400

		session = new_session()
		try:
			if data.get("html"):
				document = parse_document(data["html"], data.get("page_url") or data.get("url") or "")
			else:
				document = parse_document(
					fetch_markup(data["url"], session, settings.timeout, settings.fetch_proxies), data["url"]
				)
			compare_documents = [
				parse_document(fetch_markup(url, session, settings.timeout, settings.fetch_proxies), url)
				for url in data.get("compare_urls") or []
			]
		except FetchError as exc:
			return _fetch_error_response(exc)

		request_settings = settings
		if data.get("use_ai") is False:
			request_settings = dataclasses.replace(settings, use_ai=False)

		progress = []

		def progress_callback(level, message):
			progress.append({"level": level, "message": message})

		with _progress_lock:
			set_progress_callback(progress_callback)
			try:
				generator = generator_factory(request_settings)
				profile = asyncio.run(generator.generate(document, compare_documents))
			except Exception as exc:
				log_error(f"Profile generation failed: {exc}")
				return jsonify({"error": f"Profile generation failed: {exc}", "progress": progress}), 500
			finally:
				set_progress_callback(None)

		return jsonify({
			**profile.to_dict(),
			"embedCode": render_embed_code(profile),
			"progress": progress,
		}), 200

	@app.errorhandler(404)
	def not_found(error):
		return jsonify({"error": "Endpoint not found"}), 404

	@app.errorhandler(500)
	def internal_error(error):
		return jsonify({"error": "Internal server error"}), 500

	return app


def main() -> None:
	port = int(os.environ.get("PORT", 8081))
	debug = os.environ.get("DEBUG", "false").lower() == "true"
	create_app().run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
	main()
