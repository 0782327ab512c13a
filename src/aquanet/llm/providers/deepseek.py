from .compatible import OpenAICompatibleProvider


class DeepSeekProvider(OpenAICompatibleProvider):
    """DeepSeek provider using its OpenAI-compatible API.

    Models: 'deepseek-chat' (default) or 'deepseek-reasoner'.
    """

    default_model = "deepseek-chat"
    default_base_url = "https://api.deepseek.com/v1"
