from ..config import GatewayConfig
from ..llm import LLMProvider, create_llm_provider
from .base import BackendGateway
from .service import AquacultureService
from .streaming import StreamingAssistant


def create_gateway(config: GatewayConfig, provider: LLMProvider | None = None) -> BackendGateway:
    """Create the gateway variant named by ``config.gateway``.

    Args:
        config: Gateway configuration
        provider: Optional pre-built provider (otherwise built from config)

    Returns:
        AquacultureService for "routed", StreamingAssistant for "streaming"

    Raises:
        ValueError: If the gateway variant is not supported
    """
    if config.gateway not in ("routed", "streaming"):
        raise ValueError(
            f"Unsupported gateway: {config.gateway}. "
            f"Supported gateways: routed, streaming"
        )

    if provider is None:
        provider = create_llm_provider(
            config.provider,
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
        )

    if config.gateway == "routed":
        return AquacultureService(provider, config)
    return StreamingAssistant(provider, config)
