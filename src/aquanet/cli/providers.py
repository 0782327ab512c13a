"""Factory functions for CLI commands.

Centralizes creation of configuration, structured input and the
controller from environment variables and command options.
"""

from pathlib import Path
from typing import Any

import typer
from pydantic import ValidationError
from rich.console import Console

from ..config import GatewayConfig
from ..conversation import ConversationController
from ..tasks import AquacultureData, default_aquaculture_data

# Default console for output
_console = Console()


def get_config(console: Console | None = None, **overrides: Any) -> GatewayConfig:
    """Create gateway configuration from the environment.

    Args:
        console: Optional Rich console for output
        **overrides: Values taking precedence over the environment
            (None values are ignored)

    Raises:
        typer.Exit: If the configuration is incomplete or invalid
    """
    con = console or _console
    try:
        return GatewayConfig.from_env(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            if field == "api_key":
                con.print("[red]Error: API key not set (DEEPSEEK_API_KEY or OPENAI_API_KEY)[/red]")
            else:
                con.print(f"[red]Error: invalid configuration for {field}: {error['msg']}[/red]")
        raise typer.Exit(code=1)


def load_input(path: Path | None, console: Console | None = None) -> AquacultureData:
    """Load structured input from a JSON file, or the sample readings.

    Raises:
        typer.Exit: If the file is not valid input
    """
    if path is None:
        return default_aquaculture_data()

    con = console or _console
    try:
        return AquacultureData.model_validate_json(Path(path).read_text(encoding="utf-8"))
    except ValidationError as e:
        con.print(f"[red]Error: invalid input file {path}:[/red]\n{e}")
        raise typer.Exit(code=1)


def build_controller(config: GatewayConfig) -> ConversationController:
    """Create a controller for the configured gateway."""
    return ConversationController.from_config(config)
