from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    PORT: int = 3000

    # Google Maps keys: the browser key is only ever placed in embed URLs,
    # the server key is only ever sent to the Places web service.
    GOOGLE_MAPS_BROWSER_KEY: str = ""
    GOOGLE_MAPS_SERVER_KEY: str = ""

    LOGGER: int = 20
    LOG_DIRECTORY: str = "logs"
    LOG_TO_FILE: bool = True

    # LLM Provider Selection
    LLM_PROVIDER: str = "ollama"  # Options: openai, ollama, none
    LLM_DISABLED: bool = False

    # OpenAI-compatible Configuration
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4o-mini"

    # Ollama Configuration
    OLLAMA_HOST: str = "http://localhost:11434"
    OLLAMA_MODEL: str = "llama3.1:latest"

    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Places text-search cache
    CACHE_TTL_SECONDS: float = 300.0
    CACHE_MAX_ENTRIES: int = 500

    # Applied to /api/* routes, per client address
    RATE_LIMIT_REQUESTS: int = 60
    RATE_LIMIT_WINDOW_SECONDS: float = 60.0

    DEFAULT_RADIUS_METERS: float = 5000.0
    MAX_BODY_BYTES: int = 1024 * 1024

    CORS_ORIGIN_REGEX: str = r"^http://localhost(?::\d+)?$"

    model_config = SettingsConfigDict(
        # Look for .env in the current folder OR the parent folder
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def llm_enabled(self) -> bool:
        return not self.LLM_DISABLED and self.LLM_PROVIDER.lower() != "none"

settings = Settings()
