import asyncio
import json
from typing import Optional

from .log import log_info


class GenerationUnavailable(Exception):
	"""Any failure of the generative collaborator: transport, status, timeout or bad JSON."""


class OpenAICompletionClient:
	"""Thin async wrapper around OpenAI chat completions."""

	def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30, client=None) -> None:
		self.api_key = api_key or ""
		self.model = model
		self.timeout = timeout
		self._client = client

	def is_available(self) -> bool:
		return bool(self.api_key) or self._client is not None

	def _get_client(self):
		if self._client is None:
			from openai import AsyncOpenAI

			self._client = AsyncOpenAI(api_key=self.api_key, timeout=self.timeout)
		return self._client

	async def complete(
		self,
		system_prompt: str,
		user_prompt: str,
		max_tokens: int = 1500,
		json_mode: bool = False,
	) -> str:
		if not self.is_available():
			raise GenerationUnavailable("OpenAI API key is not configured")

		request = {
			"model": self.model,
			"messages": [
				{"role": "system", "content": system_prompt},
				{"role": "user", "content": user_prompt},
			],
			"max_tokens": max_tokens,
			"temperature": 0.2 if json_mode else 0.7,
		}
		if json_mode:
			request["response_format"] = {"type": "json_object"}

		log_info(f"Calling {self.model} (json_mode={json_mode})")
		try:
			resp = await asyncio.wait_for(
				self._get_client().chat.completions.create(**request),
				timeout=self.timeout,
			)
			content: Optional[str] = resp.choices[0].message.content
		except Exception as exc:
			raise GenerationUnavailable(f"OpenAI request failed: {exc}") from exc

		if not content:
			raise GenerationUnavailable("OpenAI returned an empty response")
		if json_mode:
			try:
				json.loads(content)
			except json.JSONDecodeError as exc:
				raise GenerationUnavailable(f"OpenAI returned invalid JSON: {exc}") from exc
		return content
