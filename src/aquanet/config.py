"""Configuration for the backend gateway.

Configuration is an explicit value handed to the gateway factory and the
controller at construction; nothing here is read at import time.
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class ToolsConfig(BaseModel):
    """Assistant capabilities advertised in the system prompt."""

    water_calculator: bool = True
    farming_calendar: bool = True
    alert_system: bool = True
    disease_identifier: bool = True
    feed_optimizer: bool = True


class ValidationConfig(BaseModel):
    """Answer validation hints passed to the model."""

    require_source_citation: bool = True
    confidence_scoring: bool = True
    expert_review_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    fact_check_sources: list[str] = Field(
        default_factory=lambda: ["trusted_research", "government_data", "industry_reports"]
    )


class CustomizationConfig(BaseModel):
    species_specific: list[str] = Field(default_factory=lambda: ["shrimp"])
    farming_methods: list[str] = Field(default_factory=lambda: ["intensive", "semi_intensive"])
    regional_guidelines: list[str] = Field(default_factory=list)
    custom_prompts: dict[str, str] = Field(
        default_factory=dict,
        description="Extra instructions keyed by topic (e.g. 'waterQuality')"
    )


class DomainConfig(BaseModel):
    """Task vocabulary and validation hints for the aquaculture domain."""

    knowledge_domains: list[str] = Field(
        default_factory=lambda: [
            "farming_techniques",
            "water_quality",
            "disease_management",
            "feed_management",
            "market_analysis",
        ]
    )
    data_sources: list[str] = Field(
        default_factory=lambda: ["research_papers", "industry_standards", "technical_guidelines"]
    )
    expertise_level: Literal["beginner", "intermediate", "expert"] = "intermediate"
    language: str = Field(default="en", description="Answer language code, e.g. 'en' or 'vi'")
    use_industry_terms: bool = True
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    customization: CustomizationConfig = Field(default_factory=CustomizationConfig)

    @classmethod
    def from_file(cls, path: Path) -> "DomainConfig":
        """Load a domain configuration from a JSON file."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


class GatewayConfig(BaseModel):
    """Options recognized by the backend gateway."""

    api_key: str = Field(repr=False, description="Credential for the model service")
    provider: Literal["deepseek", "openai"] = "deepseek"
    model: str = "deepseek-chat"
    base_url: str | None = Field(default="https://api.deepseek.com/v1")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=2000, gt=0)
    response_format: Literal["stream", "complete"] = "stream"
    gateway: Literal["routed", "streaming"] = Field(
        default="streaming",
        description="Which gateway capability the controller talks to"
    )
    domain_config: DomainConfig = Field(default_factory=DomainConfig)

    @classmethod
    def from_env(cls, **overrides: object) -> "GatewayConfig":
        """Build configuration from environment variables.

        Environment variables:
            AQUANET_PROVIDER: deepseek or openai (default: deepseek)
            DEEPSEEK_API_KEY / OPENAI_API_KEY: Credential for the provider
            AQUANET_MODEL: Model name (default depends on provider)
            AQUANET_BASE_URL: Endpoint override
            AQUANET_TEMPERATURE: Sampling temperature (default: 0.7)
            AQUANET_MAX_TOKENS: Completion limit (default: 2000)
            AQUANET_RESPONSE_FORMAT: stream or complete (default: stream)
            AQUANET_GATEWAY: routed or streaming (default: streaming)
            AQUANET_LANGUAGE: Answer language (default: en)
            AQUANET_DOMAIN_CONFIG: Path to a DomainConfig JSON file

        Keyword overrides take precedence over the environment.

        Raises:
            pydantic.ValidationError: If a value is missing or out of range
        """
        provider = os.getenv("AQUANET_PROVIDER", "deepseek").lower()
        if provider == "openai":
            api_key = os.getenv("OPENAI_API_KEY")
            model = os.getenv("AQUANET_MODEL", "gpt-4o-mini")
            base_url = os.getenv("AQUANET_BASE_URL")
        else:
            api_key = os.getenv("DEEPSEEK_API_KEY")
            model = os.getenv("AQUANET_MODEL", "deepseek-chat")
            base_url = os.getenv("AQUANET_BASE_URL", "https://api.deepseek.com/v1")

        domain_path = os.getenv("AQUANET_DOMAIN_CONFIG")
        domain = DomainConfig.from_file(Path(domain_path)) if domain_path else DomainConfig()
        language = os.getenv("AQUANET_LANGUAGE")
        if language:
            domain = domain.model_copy(update={"language": language})

        values: dict[str, object] = {
            "api_key": api_key,
            "provider": provider,
            "model": model,
            "base_url": base_url,
            "temperature": os.getenv("AQUANET_TEMPERATURE", "0.7"),
            "max_tokens": os.getenv("AQUANET_MAX_TOKENS", "2000"),
            "response_format": os.getenv("AQUANET_RESPONSE_FORMAT", "stream"),
            "gateway": os.getenv("AQUANET_GATEWAY", "streaming"),
            "domain_config": domain,
        }
        values.update(overrides)
        return cls.model_validate(values)
