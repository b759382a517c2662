from resumeiq.ai.providers.openai_provider import OpenAIProvider
from resumeiq.ai.types import AIClient
from resumeiq.core.config import Settings


def get_ai_client(config: Settings) -> AIClient:
    # Groq exposes an OpenAI-compatible endpoint, so both go through the same SDK.
    if config.ai_provider in {"openai", "groq"}:
        return OpenAIProvider(
            model=config.ai_model,
            api_key=config.ai_api_key,
            base_url=config.ai_base_url,
            timeout_s=config.ai_timeout_s,
        )

    raise ValueError(f"Unsupported AI_PROVIDER='{config.ai_provider}'")
