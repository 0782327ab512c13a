"""Prompt builder.

Maps (task kind, structured input, free-text question) to the prompt text
sent to the model. Pure: no network, no mutable state beyond the template
cache.
"""

import json
from collections import deque
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from ..config import DomainConfig
from ..tasks import TaskCatalog, TaskKind, default_catalog

GENERIC_TEMPLATE = "generic"
SYSTEM_TEMPLATE = "system"
USER_QUESTION_HEADER = "User question:"
MISSING_VALUE = "n/a"
TEMPLATE_SUFFIX = ".txt"
LOCAL_TEMPLATE_DIR = "prompts"

_BUNDLED_TEMPLATES = Path(__file__).parent


def template_search_path() -> list[Path]:
    """Directories holding templates, highest priority first.

    A ./prompts directory under the working directory shadows the
    templates shipped with the package, one file at a time.
    """
    return [Path.cwd() / LOCAL_TEMPLATE_DIR, _BUNDLED_TEMPLATES]


@lru_cache(maxsize=None)
def read_template(name: str) -> str:
    """Return the text of template ``name``.

    Raises:
        FileNotFoundError: If no directory on the search path has it
    """
    candidates = [directory / f"{name}{TEMPLATE_SUFFIX}" for directory in template_search_path()]
    for path in candidates:
        if path.is_file():
            return path.read_text(encoding="utf-8")
    raise FileNotFoundError(
        f"No template named {name!r} (looked in: {', '.join(str(c.parent) for c in candidates)})"
    )


def reload_templates() -> None:
    """Forget cached templates so edited files are picked up."""
    read_template.cache_clear()


def to_plain_data(structured_input: Any) -> dict[str, Any]:
    """Convert structured input to a JSON-compatible dict.

    Pydantic models are dumped with their aliases; mappings are copied.
    Anything else is wrapped under a 'value' key.
    """
    if structured_input is None:
        return {}
    if isinstance(structured_input, BaseModel):
        return structured_input.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(structured_input, Mapping):
        return json.loads(json.dumps(dict(structured_input), default=str))
    return {"value": json.loads(json.dumps(structured_input, default=str))}


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


def find_field(data: Mapping[str, Any], name: str) -> Any | None:
    """Find a field anywhere in nested input, shallowest match first.

    Keys are compared ignoring case and underscores, so 'dissolvedOxygen'
    matches 'dissolved_oxygen' in flat input.
    """
    wanted = _normalize_key(name)
    queue: deque[Mapping[str, Any]] = deque([data])
    while queue:
        current = queue.popleft()
        for key, value in current.items():
            if _normalize_key(str(key)) == wanted and not isinstance(value, Mapping):
                return value
        queue.extend(v for v in current.values() if isinstance(v, Mapping))
    return None


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


class _FieldLookup(dict):
    """Template mapping that resolves placeholders from structured input."""

    def __init__(self, data: Mapping[str, Any]):
        super().__init__(data=json.dumps(data, indent=2, ensure_ascii=False))
        self._source = data

    def __missing__(self, key: str) -> str:
        value = find_field(self._source, key)
        return MISSING_VALUE if value is None else _format_value(value)


class PromptBuilder:
    """Builds request prompts from task templates.

    Unknown or missing task kinds fall back to a generic template that
    serializes the entire structured input. A non-blank question is always
    appended as a delimited trailing section.
    """

    def __init__(self, catalog: TaskCatalog | None = None):
        self._catalog = catalog or default_catalog

    def template_name(self, kind: TaskKind | str | None) -> str:
        spec = self._catalog.find(kind) if kind is not None else None
        return spec.template if spec is not None else GENERIC_TEMPLATE

    def build(
        self,
        kind: TaskKind | str | None,
        structured_input: Any,
        free_text: str = "",
    ) -> str:
        """Build the prompt for a submission.

        Args:
            kind: Task kind, or None for the generic template
            structured_input: Pydantic model or mapping with readings
            free_text: The user's question (may be blank)

        Returns:
            Prompt text
        """
        data = to_plain_data(structured_input)
        template = read_template(self.template_name(kind))
        prompt = template.format_map(_FieldLookup(data)).rstrip()

        if free_text and free_text.strip():
            prompt += f"\n\n{USER_QUESTION_HEADER} {free_text.strip()}"
        return prompt


def build_system_prompt(domain: DomainConfig | None = None) -> str:
    """Render the domain configuration into the system message."""
    domain = domain or DomainConfig()
    custom = domain.customization
    tools = [name for name, enabled in domain.tools.model_dump().items() if enabled]

    validation_lines = []
    if domain.validation.require_source_citation:
        validation_lines.append("Cite the sources behind each recommendation.")
    if domain.validation.confidence_scoring:
        validation_lines.append(
            "State a confidence score between 0 and 1 for each conclusion; "
            f"recommend expert review below {domain.validation.expert_review_threshold}."
        )
    if domain.validation.fact_check_sources:
        validation_lines.append(
            "Cross-check facts against: " + ", ".join(domain.validation.fact_check_sources) + "."
        )

    custom_lines = [f"- {topic}: {text}" for topic, text in custom.custom_prompts.items()]

    template = read_template(SYSTEM_TEMPLATE)
    prompt = template.format(
        knowledge_domains=_format_value(domain.knowledge_domains) or "general aquaculture",
        data_sources=_format_value(domain.data_sources) or "any reliable source",
        expertise_level=domain.expertise_level,
        language=domain.language,
        terminology=(
            "Use standard industry terminology."
            if domain.use_industry_terms
            else "Avoid jargon; explain terms in plain language."
        ),
        tools=", ".join(tools) or "none",
        species=_format_value(custom.species_specific) or "any",
        farming_methods=_format_value(custom.farming_methods) or "any",
        regional_guidelines=_format_value(custom.regional_guidelines) or "none",
        validation="\n".join(validation_lines),
        custom_prompts=("Additional instructions:\n" + "\n".join(custom_lines)) if custom_lines else "",
    )
    # Drop blank lines left by empty sections
    return "\n".join(line for line in prompt.splitlines() if line.strip())
