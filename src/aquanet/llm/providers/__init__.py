from .compatible import OpenAICompatibleProvider
from .deepseek import DeepSeekProvider
from .openai import OpenAIProvider

__all__ = ["DeepSeekProvider", "OpenAICompatibleProvider", "OpenAIProvider"]
