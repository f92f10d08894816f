import hashlib
import json
import numbers
import os
import time
from typing import Any, Optional

from slugify import slugify

from .log import log_info, log_warn


def cache_key(operation: str, name: str, brand: str) -> str:
	return f"{operation}_{name}_{brand}"


def _is_timestamp(value) -> bool:
	return isinstance(value, numbers.Real) and not isinstance(value, bool)


class FileCache:
	"""JSON-file key/value cache with a freshness window."""

	def __init__(self, directory: str, ttl_seconds: int = 24 * 60 * 60, enabled: bool = True) -> None:
		self.directory = directory
		self.ttl_seconds = ttl_seconds
		self.enabled = enabled

	def _path(self, key: str) -> str:
		# slugify is lossy; the digest keeps distinct keys apart
		digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]
		return os.path.join(self.directory, f"{slugify(key, max_length=80) or 'entry'}-{digest}.json")

	def get(self, key: str) -> Optional[Any]:
		if not self.enabled:
			return None
		path = self._path(key)
		if not os.path.exists(path):
			return None
		try:
			with open(path, "r", encoding="utf-8") as f:
				entry = json.load(f)
		except (OSError, ValueError) as exc:
			log_warn(f"Cache read error for {key}: {exc}")
			return None

		if not isinstance(entry, dict) or entry.get("key") != key or not _is_timestamp(entry.get("timestamp")):
			log_warn(f"Cache entry for {key} is malformed, ignoring")
			return None

		age = time.time() - entry["timestamp"]
		if age < self.ttl_seconds:
			log_info(f"Cache hit for {key} (age: {round(age)}s)")
			return entry.get("data")

		# Cache expired
		try:
			os.remove(path)
		except OSError as exc:
			log_warn(f"Could not delete expired cache entry {path}: {exc}")
		return None

	def set(self, key: str, value: Any) -> None:
		if not self.enabled:
			return
		try:
			os.makedirs(self.directory, exist_ok=True)
			with open(self._path(key), "w", encoding="utf-8") as f:
				json.dump({"key": key, "data": value, "timestamp": time.time()}, f, ensure_ascii=False)
			log_info(f"Cached result for {key}")
		except (OSError, TypeError) as exc:
			log_warn(f"Cache write error for {key}: {exc}")

	def clear(self) -> None:
		if not os.path.isdir(self.directory):
			return
		for name in os.listdir(self.directory):
			if name.endswith(".json"):
				try:
					os.remove(os.path.join(self.directory, name))
				except OSError as exc:
					log_warn(f"Could not delete cache entry {name}: {exc}")
		log_info("Cache cleared")
