#!/usr/bin/env python3
import argparse
import asyncio
import json
import os
from typing import List, Optional

import requests
from colorama import Fore, Style

from .cache import FileCache
from .config import load_settings
from .document import parse_document
from .embed import render_embed_code
from .fetcher import FetchError, fetch_markup, render_markup
from .log import init_logging, log_error, log_info
from .profile import ProfileGenerator


def load_markup(url: str, settings, session: requests.Session, render: bool = False) -> str:
	if render:
		rendered = render_markup(url, settings.timeout)
		if rendered:
			return rendered
	return fetch_markup(url, session, settings.timeout, settings.fetch_proxies)


def create_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(description="Generate an LLM-ready product profile from a product page.")
	source = parser.add_mutually_exclusive_group()
	source.add_argument("--url", help="Product page URL to fetch")
	source.add_argument("--html-file", help="Read product page markup from a local file")
	parser.add_argument("--page-url", help="URL the --html-file was saved from (used to match the product name)")
	parser.add_argument("--compare-url", action="append", default=[], help="Competitor product page to compare against (repeatable)")
	parser.add_argument("--output", help="Write the profile JSON here instead of stdout")
	parser.add_argument("--embed", help="Also write the embeddable HTML fragment to this path")
	parser.add_argument("--no-ai", action="store_true", help="Skip OpenAI and use the static catalog and template narrative")
	parser.add_argument("--model", help="OpenAI model for competitors and narrative")
	parser.add_argument("--api-key", help="OpenAI API key override (will take precedence)")
	parser.add_argument("--config", help="Path to project config JSON (default: profiler_config.json)")
	parser.add_argument("--render", action="store_true", help="Render pages with Playwright before extraction")
	parser.add_argument("--clear-cache", action="store_true", help="Clear cached AI responses and exit")
	return parser


def main(argv: Optional[List[str]] = None) -> None:
	parser = create_parser()
	args = parser.parse_args(argv)

	init_logging()
	settings = load_settings(
		args.config,
		api_key=args.api_key,
		model=args.model,
		use_ai=False if args.no_ai else None,
	)

	if args.clear_cache:
		FileCache(settings.cache_dir, settings.cache_ttl).clear()
		return
	if not args.url and not args.html_file:
		parser.error("one of --url or --html-file is required")

	session = requests.Session()
	session.headers.update({"User-Agent": settings.user_agent})

	try:
		if args.html_file:
			with open(args.html_file, "r", encoding="utf-8") as f:
				document = parse_document(f.read(), args.page_url or "")
		else:
			document = parse_document(load_markup(args.url, settings, session, args.render), args.url)
		compare_documents = [
			parse_document(load_markup(url, settings, session, args.render), url)
			for url in args.compare_url
		]
	except FetchError as exc:
		if exc.blocked:
			log_error("This site blocks automated access (bot protection). Try saving the page and using --html-file.")
		log_error(f"Failed to fetch product page: {exc}")
		raise SystemExit(1)

	generator = ProfileGenerator.from_settings(settings)
	profile = asyncio.run(generator.generate(document, compare_documents))

	payload = json.dumps(profile.to_dict(), ensure_ascii=False, indent=2)
	if args.output:
		os.makedirs(os.path.dirname(os.path.abspath(args.output)), exist_ok=True)
		with open(args.output, "w", encoding="utf-8") as f:
			f.write(payload)
		log_info(f"Wrote profile: {args.output}")
	else:
		print(payload)

	if args.embed:
		with open(args.embed, "w", encoding="utf-8") as f:
			f.write(render_embed_code(profile))
		log_info(f"Wrote embed code: {args.embed}")

	print(Fore.MAGENTA + f"✓ {profile.raw_record.name}: {len(profile.narrative.split())} words" + Style.RESET_ALL)


if __name__ == "__main__":
	main()
