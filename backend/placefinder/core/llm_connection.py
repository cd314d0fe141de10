import httpx
import logging
from placefinder.core.config import Settings
from placefinder.core.logger import logs
from placefinder.core.llm_providers import (
    BaseLLMProvider,
    OpenAIProvider,
    OllamaProvider
)

MAX_QUERY_LENGTH = 128

SYSTEM_PROMPT = (
    "You help translate user requests into concise place search queries. "
    'Output ONLY a short query like "best ramen near Shibuya" or a category like "coffee shop in Boston". '
    "No extra text."
)


def build_provider(settings: Settings, client: httpx.AsyncClient) -> BaseLLMProvider | None:
    """Select the LLM provider once, from configuration. None means LLM integration is disabled."""
    if not settings.llm_enabled:
        logs.log(logging.INFO, "LLM integration disabled, prompts are used as search queries")
        return None

    provider = settings.LLM_PROVIDER.lower()

    if provider == "openai":
        if settings.OPENAI_API_KEY:
            return OpenAIProvider(
                client,
                api_key=settings.OPENAI_API_KEY,
                model=settings.OPENAI_MODEL,
                base_url=settings.OPENAI_BASE_URL
            )
        logs.log(logging.WARNING, "LLM_PROVIDER is 'openai' but OPENAI_API_KEY is not set, using Ollama")
    elif provider != "ollama":
        logs.log(logging.WARNING, f"Unknown provider '{provider}', defaulting to Ollama")

    return OllamaProvider(
        client,
        host=settings.OLLAMA_HOST,
        model=settings.OLLAMA_MODEL
    )


class QueryExtractor:
    """
    Turns a free-text prompt into a short place search query.
    Never raises: every failure falls back to the truncated prompt.
    """

    def __init__(self, provider: BaseLLMProvider | None, timeout: float = 10.0):
        self.provider = provider
        self.timeout = timeout
        if provider is not None:
            logs.log(logging.INFO, f"🤖 LLM Provider initialized: {provider.get_provider_name()}")

    @staticmethod
    def default_query(prompt: str) -> str:
        return prompt[:MAX_QUERY_LENGTH]

    async def extract_query(self, prompt: str) -> str:
        default_query = self.default_query(prompt)
        if self.provider is None:
            return default_query

        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]

        try:
            content = await self.provider.generate(messages, temperature=0.2, timeout=self.timeout)
        except Exception as e:
            logs.log(logging.ERROR, f"Query extraction failed, using prompt as query: {str(e)}")
            return default_query

        if not content:
            logs.log(logging.WARNING, "LLM returned an empty query, using prompt as query")
            return default_query

        logs.log(logging.INFO, f"Extracted search query: {content}")
        return content
