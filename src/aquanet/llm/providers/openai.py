from .compatible import OpenAICompatibleProvider


class OpenAIProvider(OpenAICompatibleProvider):
    """OpenAI provider; base_url may point at any compatible endpoint."""

    default_model = "gpt-4o-mini"
