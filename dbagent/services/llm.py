import logging

import httpx

from ..config import Settings

logger = logging.getLogger(__name__)

# Pluggable text-generation gateway. Anthropic (Messages API) is the default;
# LLM_PROVIDER=ollama talks to a local Ollama daemon and LLM_PROVIDER=openai
# goes through the official SDK (pip install "db-agent-tasks[openai]").

ANTHROPIC_VERSION = "2023-06-01"


class GenerationError(RuntimeError):
    """The provider could not produce a completion for the prompt."""


class LLM:
    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self.provider = settings.provider
        self.model_name = settings.llm_model
        self.anthropic_api_key = settings.anthropic_api_key
        self.anthropic_base = settings.anthropic_base_url
        self.openai_api_key = settings.openai_api_key
        self.ollama_base = settings.ollama_base_url
        self.timeout = settings.llm_timeout_seconds
        self.max_tokens = settings.llm_max_tokens
        self._transport = transport

    def generate(self, prompt: str) -> str:
        if self.provider == "anthropic":
            text = self._anthropic_chat(prompt)
        elif self.provider == "ollama":
            text = self._ollama_chat(prompt)
        elif self.provider == "openai":
            text = self._openai_chat(prompt)
        else:
            raise GenerationError(f"Unsupported LLM provider: {self.provider}")

        if not text or not text.strip():
            raise GenerationError(f"{self.provider} returned an empty completion")
        return text.strip()

    def _anthropic_chat(self, prompt: str) -> str:
        url = f"{self.anthropic_base.rstrip('/')}/v1/messages"
        headers = {
            "x-api-key": self.anthropic_api_key or "",
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        payload = {
            "model": self.model_name,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        data = self._post_json(url, payload, headers)
        blocks = data.get("content") or []
        return "".join(b.get("text", "") for b in blocks if b.get("type") == "text")

    def _ollama_chat(self, prompt: str) -> str:
        # Uses Ollama /api/generate for a simple prompt -> completion call
        url = f"{self.ollama_base.rstrip('/')}/api/generate"
        payload = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
        }
        data = self._post_json(url, payload)
        return data.get("response", "")

    def _openai_chat(self, prompt: str) -> str:
        try:
            from openai import OpenAI
        except ImportError as exc:
            raise GenerationError("the openai package is required for the openai provider") from exc

        try:
            client = OpenAI(api_key=self.openai_api_key, timeout=self.timeout)
            resp = client.chat.completions.create(
                model=self.model_name,
                messages=[
                    {"role": "system", "content": "You are a meticulous data quality analyst."},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.2,
            )
            return resp.choices[0].message.content or ""
        except Exception as exc:
            raise GenerationError(f"OpenAI error: {exc}") from exc

    def _post_json(self, url: str, payload: dict, headers: dict | None = None) -> dict:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                r = client.post(url, json=payload, headers=headers)
                r.raise_for_status()
                return r.json()
        except httpx.HTTPStatusError as exc:
            logger.error("%s returned HTTP %s", self.provider, exc.response.status_code)
            raise GenerationError(
                f"{self.provider} request failed with status {exc.response.status_code}: {exc.response.text[:500]}"
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("%s request failed: %s", self.provider, exc)
            raise GenerationError(f"{self.provider} request failed: {exc}") from exc
