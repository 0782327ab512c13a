from typing import Any

from .base import LLMProvider
from .providers import DeepSeekProvider, OpenAIProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create an LLM provider instance.

    Args:
        provider: Provider type ('deepseek' or 'openai')
        **config: Provider-specific configuration
            - api_key: str (required)
            - model: str (default: 'deepseek-chat' / 'gpt-4o-mini')
            - base_url: str | None

    Returns:
        Initialized LLM provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If api_key is missing

    Examples:
        >>> provider = create_llm_provider("deepseek", api_key="sk-...")
    """
    provider_lower = provider.lower()

    if provider_lower == "deepseek":
        if "api_key" not in config:
            raise TypeError("DeepSeek provider requires 'api_key' in config")
        return DeepSeekProvider(**config)

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'deepseek', 'openai'"
    )
