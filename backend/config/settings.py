from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Loads all environment variables into a single, accessible object.

    Every credential is optional: a missing key disables the capability that
    needs it instead of failing the process.
    """
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    JUDGE_API_KEY: Optional[str] = None
    JUDGE_BASE_URL: str = "https://app.backboard.io/api"

    GOOGLE_SEARCH_API_KEY: Optional[str] = None
    GOOGLE_SEARCH_ENGINE_ID: Optional[str] = None
    GOOGLE_SEARCH_ENDPOINT: str = "https://www.googleapis.com/customsearch/v1"

    VERIFIER_MODELS: List[str] = [
        "openai/gpt-4o",
        "anthropic/claude-3-5-sonnet-20241022",
        "google/gemini-2.5-flash",
    ]
    SEARCH_MODEL: str = "openrouter/perplexity/sonar-pro"
    SEARCH_FALLBACK_MODEL: str = "openai/gpt-4o-mini"
    DEFAULT_MODEL: str = "openai/gpt-4o-mini"


def split_model_ref(model_ref: str) -> tuple[str, str]:
    """Split ``provider/model`` into its parts; the model may itself contain slashes."""
    provider, _, model_name = model_ref.partition("/")
    if not model_name:
        return "openai", provider
    return provider, model_name
