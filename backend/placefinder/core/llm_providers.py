"""
LLM Provider Implementations
Two chat backends behind a unified interface: an OpenAI-compatible API and a local Ollama endpoint.
"""
import httpx
import logging
from abc import ABC, abstractmethod
from placefinder.core.errors import UpstreamError
from placefinder.core.logger import logs

class BaseLLMProvider(ABC):
    """Base class for all LLM providers"""

    def __init__(self, client: httpx.AsyncClient, model: str):
        self.client = client
        self.model = model

    @abstractmethod
    async def generate(self, messages: list, temperature: float = 0.2, timeout: float = 10.0) -> str:
        """Generate a response from the LLM"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of the provider"""
        pass

    async def _post(self, url: str, payload: dict, headers: dict, timeout: float) -> dict:
        try:
            response = await self.client.post(url, json=payload, headers=headers, timeout=timeout)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logs.log(logging.ERROR, f"{self.get_provider_name()} API error: {str(e)}")
            raise UpstreamError(f"{self.get_provider_name()} request failed") from e


class OpenAIProvider(BaseLLMProvider):
    """OpenAI-compatible chat completions provider (OpenAI, or any server exposing the same API)"""

    def __init__(self, client: httpx.AsyncClient, api_key: str, model: str, base_url: str = "https://api.openai.com/v1"):
        super().__init__(client, model)
        self.api_key = api_key
        self.base_url = f"{base_url.rstrip('/')}/chat/completions"
        self.headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json"
        }

    async def generate(self, messages: list, temperature: float = 0.2, timeout: float = 10.0) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": 30
        }

        data = await self._post(self.base_url, payload, self.headers, timeout)
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("OpenAI response missing message content") from e
        return (content or "").strip()

    def get_provider_name(self) -> str:
        return "OpenAI"


class OllamaProvider(BaseLLMProvider):
    """Local Ollama endpoint"""

    def __init__(self, client: httpx.AsyncClient, host: str, model: str):
        super().__init__(client, model)
        self.base_url = f"{host.rstrip('/')}/api/chat"
        self.headers = {"Content-Type": "application/json"}

    async def generate(self, messages: list, temperature: float = 0.2, timeout: float = 10.0) -> str:
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": {"temperature": temperature}
        }

        data = await self._post(self.base_url, payload, self.headers, timeout)
        if not isinstance(data, dict):
            raise UpstreamError("Ollama response is not a JSON object")

        content = (data.get("message") or {}).get("content")
        if not content and data.get("messages"):
            content = (data["messages"][-1] or {}).get("content")
        return (content or "").strip()

    def get_provider_name(self) -> str:
        return "Ollama"
