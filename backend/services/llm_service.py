"""
LLM Service - Single request/response calls to the configured LLM provider

No streaming and no retries: a failed call is reported to the caller as a
CollaboratorError and the request that triggered it fails.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp

from .errors import CollaboratorError, NoCompletionReceived

logger = logging.getLogger(__name__)

SUPPORTED_PROVIDERS = ("openai", "gemini", "vllm")


class LLMService:
    """Service for interacting with various LLM providers"""

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self.provider = config.get("provider", "openai")
        self.timeout_seconds = config.get("timeoutSeconds", 60)

    # ========== Config Helpers ==========

    def _get_openai_config(self) -> tuple[str, str, dict[str, str]]:
        """Get OpenAI config: (model, url, headers). Raises if api_key missing."""
        cfg = self.config.get("openai", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            raise CollaboratorError("OpenAI API key not configured", provider="OpenAI")
        model = cfg.get("model", "gpt-4o-mini")
        url = f"{cfg.get('baseUrl', 'https://api.openai.com/v1').rstrip('/')}/chat/completions"
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        if cfg.get("organization"):
            headers["OpenAI-Organization"] = cfg["organization"]
        return model, url, headers

    def _get_gemini_config(self) -> tuple[str, str, str]:
        """Get Gemini config: (api_key, model, base_url). Raises if api_key missing."""
        cfg = self.config.get("gemini", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            raise CollaboratorError("Gemini API key not configured", provider="Gemini")
        model = cfg.get("model", "gemini-2.5-flash")
        base_url = f"https://generativelanguage.googleapis.com/v1beta/models/{model}"
        return api_key, model, base_url

    def _get_vllm_config(self) -> tuple[str, str, dict[str, str]]:
        """Get vLLM config: (model, url, headers)."""
        cfg = self.config.get("vllm", {})
        endpoint = cfg.get("endpoint", "http://localhost:8000")
        model = cfg.get("model", "default")
        url = f"{endpoint.rstrip('/')}/v1/chat/completions"
        headers = {"Content-Type": "application/json"}
        if cfg.get("apiKey"):
            headers["Authorization"] = f"Bearer {cfg['apiKey']}"
        return model, url, headers

    # ========== Message/Payload Builders ==========

    def _build_openai_messages(self, prompt: str, system: str | None = None) -> list:
        """Build OpenAI-style messages array"""
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        return messages

    def _build_openai_payload(
        self,
        model: str,
        messages: list,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        """Build OpenAI-compatible request payload"""
        return {
            "model": model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "stream": False,
        }

    def _build_gemini_payload(
        self,
        prompt: str,
        max_output_tokens: int,
        temperature: float,
        system: str | None = None,
    ) -> dict[str, Any]:
        """Build Gemini API request payload"""
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": temperature,
                "maxOutputTokens": max_output_tokens,
            },
        }
        if system:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        return payload

    # ========== Transport ==========

    async def _request_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        provider: str = "API",
    ) -> dict[str, Any]:
        """POST a JSON payload and return the decoded JSON body"""
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        logger.warning("%s API error (%d): %s", provider, response.status, error_text)
                        raise CollaboratorError(
                            f"{provider} API error ({response.status}): {error_text}",
                            provider=provider,
                            http_status=response.status,
                        )
                    return await response.json()
        except aiohttp.ClientError as e:
            raise CollaboratorError(f"{provider} request failed: {e}", provider=provider) from e
        except asyncio.TimeoutError as e:
            raise CollaboratorError(
                f"{provider} request timed out after {self.timeout_seconds}s", provider=provider
            ) from e
        except ValueError as e:
            raise CollaboratorError(f"{provider} returned invalid JSON: {e}", provider=provider) from e

    # ========== Response Parsers ==========

    def _parse_openai_response(self, data: Any, provider: str = "OpenAI") -> str:
        """Parse OpenAI-compatible response format"""
        if not isinstance(data, dict):
            raise CollaboratorError(f"Unrecognized completion format from {provider}", provider=provider)

        choices = data.get("choices") or []
        if not isinstance(choices, list):
            raise CollaboratorError(f"Unrecognized completion format from {provider}", provider=provider)
        if not choices:
            raise NoCompletionReceived(f"no completion response received from {provider}", provider=provider)

        choice = choices[0]
        if not isinstance(choice, dict):
            raise CollaboratorError(f"Unrecognized completion format from {provider}", provider=provider)

        message = choice.get("message") or {}
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]
        if isinstance(choice.get("text"), str):
            return choice["text"]
        raise CollaboratorError(f"Unrecognized completion format from {provider}", provider=provider)

    def _parse_gemini_response(self, data: Any) -> str:
        """Parse Gemini API response format"""
        if not isinstance(data, dict) or not isinstance(data.get("candidates") or [], list):
            raise CollaboratorError("Unrecognized completion format from Gemini", provider="Gemini")

        candidates = data.get("candidates") or []
        if not candidates:
            raise NoCompletionReceived("no completion response received from Gemini", provider="Gemini")

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if isinstance(parts, list) and parts and isinstance(parts[0], dict) and isinstance(parts[0].get("text"), str):
            return parts[0]["text"]
        raise CollaboratorError("Unrecognized completion format from Gemini", provider="Gemini")

    # ========== Public API ==========

    async def generate_response(
        self,
        prompt: str,
        system: str | None = None,
        max_tokens: int = 2048,
        temperature: float = 0.0,
    ) -> str:
        """Generate a response from the configured LLM provider"""
        if self.provider == "openai":
            return await self._call_openai(prompt, system, max_tokens, temperature)
        elif self.provider == "gemini":
            return await self._call_gemini(prompt, system, max_tokens, temperature)
        elif self.provider == "vllm":
            return await self._call_vllm(prompt, system, max_tokens, temperature)
        else:
            raise CollaboratorError(f"Unsupported provider: {self.provider}", provider=self.provider)

    async def _call_openai(self, prompt: str, system: str | None, max_tokens: int, temperature: float) -> str:
        """Call OpenAI chat completions"""
        model, url, headers = self._get_openai_config()
        messages = self._build_openai_messages(prompt, system)
        payload = self._build_openai_payload(model, messages, max_tokens, temperature)

        logger.info("Calling OpenAI API with model: %s", model)
        data = await self._request_json(url, payload, headers, provider="OpenAI")
        return self._parse_openai_response(data, "OpenAI")

    async def _call_gemini(self, prompt: str, system: str | None, max_tokens: int, temperature: float) -> str:
        """Call Google Gemini generateContent"""
        api_key, model, base_url = self._get_gemini_config()
        url = f"{base_url}:generateContent?key={api_key}"
        payload = self._build_gemini_payload(prompt, max_tokens, temperature, system)

        logger.info("Calling Gemini API with model: %s", model)
        data = await self._request_json(url, payload, provider="Gemini")
        return self._parse_gemini_response(data)

    async def _call_vllm(self, prompt: str, system: str | None, max_tokens: int, temperature: float) -> str:
        """Call vLLM endpoint with OpenAI Compatible API"""
        model, url, headers = self._get_vllm_config()
        messages = self._build_openai_messages(prompt, system)
        payload = self._build_openai_payload(model, messages, max_tokens, temperature)

        logger.info("Calling vLLM endpoint %s with model: %s", url, model)
        data = await self._request_json(url, payload, headers, provider="vLLM")
        return self._parse_openai_response(data, "vLLM")
