import json
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from dotenv import load_dotenv

CONFIG_DIR = os.path.expanduser("~/.product_profiler")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")
PROJECT_CONFIG_FILE = "profiler_config.json"

DEFAULT_MODEL = "gpt-4o-mini"
CACHE_TTL_SECONDS = 24 * 60 * 60

USER_AGENT_DEFAULT = (
	"Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
	"(KHTML, like Gecko) Product-Profiler/1.0"
)


@dataclass
class Settings:
	api_key: str = ""
	model: str = DEFAULT_MODEL
	timeout: int = 30
	use_ai: bool = True
	cache_enabled: bool = True
	cache_dir: str = os.path.join(CONFIG_DIR, "cache")
	cache_ttl: int = CACHE_TTL_SECONDS
	fetch_proxies: List[str] = field(default_factory=list)
	user_agent: str = USER_AGENT_DEFAULT


def read_json(path: str) -> Dict:
	try:
		with open(path, "r", encoding="utf-8") as f:
			return json.load(f)
	except (OSError, ValueError):
		return {}


def _split_proxies(value) -> List[str]:
	if not value:
		return []
	if isinstance(value, str):
		return [p.strip() for p in value.split(",") if p.strip()]
	return [str(p) for p in value]


def load_settings(config_path: Optional[str] = None, **overrides) -> Settings:
	"""Resolve settings from overrides, environment, project config and user config.

	Precedence (first wins): explicit keyword overrides, environment variables
	(``.env`` is loaded first), ``profiler_config.json`` (or ``config_path``),
	``~/.product_profiler/config.json``, then the dataclass defaults.
	"""
	load_dotenv()

	project_cfg = read_json(config_path or PROJECT_CONFIG_FILE)
	user_cfg = read_json(CONFIG_FILE)

	def pick(name: str, env_var: Optional[str] = None, default=None):
		if overrides.get(name) is not None:
			return overrides[name]
		if env_var and os.environ.get(env_var):
			return os.environ[env_var]
		if name in project_cfg:
			return project_cfg[name]
		if name in user_cfg:
			return user_cfg[name]
		return default

	defaults = Settings()
	return Settings(
		api_key=pick("api_key", "OPENAI_API_KEY", project_cfg.get("openai_api_key") or user_cfg.get("openai_api_key") or ""),
		model=pick("model", "PROFILER_MODEL", defaults.model),
		timeout=int(pick("timeout", "PROFILER_TIMEOUT", defaults.timeout)),
		use_ai=bool(pick("use_ai", None, defaults.use_ai)),
		cache_enabled=bool(pick("cache_enabled", None, defaults.cache_enabled)),
		cache_dir=os.path.expanduser(pick("cache_dir", "PROFILER_CACHE_DIR", defaults.cache_dir)),
		cache_ttl=int(pick("cache_ttl", None, defaults.cache_ttl)),
		fetch_proxies=_split_proxies(pick("fetch_proxies", "PROFILER_FETCH_PROXIES", [])),
		user_agent=pick("user_agent", None, defaults.user_agent),
	)
