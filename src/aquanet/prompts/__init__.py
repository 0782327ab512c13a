"""Prompt construction.

Turns a task kind, structured input and free-text question into the
request payload, and the domain configuration into the system prompt.
Templates are externalized to text files and can be overridden by
placing files in ./prompts/.
"""

from .builder import (
    USER_QUESTION_HEADER,
    PromptBuilder,
    build_system_prompt,
    read_template,
    reload_templates,
)

__all__ = [
    "USER_QUESTION_HEADER",
    "PromptBuilder",
    "build_system_prompt",
    "read_template",
    "reload_templates",
]
