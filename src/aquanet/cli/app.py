"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console, Group
from rich.live import Live
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..conversation import ConversationController, ControllerEvent, EventKind, Message, Role
from ..errors import AquanetError
from ..prompts import PromptBuilder, build_system_prompt
from ..tasks import AquacultureData, TaskKind, default_catalog
from .console import LogLevel, console_debug_callback
from .providers import build_controller, get_config, load_input

# Load environment variables
load_dotenv()

app = typer.Typer(
    name="aquanet",
    help="Streaming aquaculture assistant backed by a language model",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

CHAT_HELP = """[bold]Commands[/bold]
  /task KIND   select a task kind (or 'none' for free text)
  /reset       clear history and analytics
  /save [DIR]  export history as JSON (default: current directory)
  /history     show the conversation so far
  /debug       show the last request or error
  /analytics   show response times
  /quit        leave the chat"""


def _answer_panel(content: str, title: str = "Answer", border_style: str = "cyan") -> Panel:
    return Panel(Markdown(content or "..."), title=title, border_style=border_style)


async def run_submission(
    controller: ConversationController,
    task: TaskKind | None,
    data: AquacultureData,
    question: str,
) -> Message | None:
    """Submit one question, rendering the answer live as it streams in."""
    with Live(_answer_panel(""), console=console, refresh_per_second=8) as live:

        def _render(event: ControllerEvent) -> None:
            if event.kind in (EventKind.CHUNK, EventKind.COMPLETED):
                live.update(_answer_panel(event.content or ""))
            elif event.kind is EventKind.FAILED:
                live.update(Group(
                    _answer_panel(event.content or "", border_style="red"),
                    f"[bold red]Error: {event.error}[/bold red]",
                ))

        unsubscribe = controller.subscribe(_render)
        try:
            return await controller.submit(task, data, question)
        finally:
            unsubscribe()


def _print_latency(controller: ConversationController) -> None:
    snapshot = controller.debug_snapshot
    if controller.last_error is None and snapshot is not None and snapshot.kind == "success":
        console.print(f"[dim]Response time: {snapshot.latency_ms} ms[/dim]")


def _print_analytics(controller: ConversationController) -> None:
    samples = controller.analytics
    if not samples:
        console.print("[yellow]No completed requests yet[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Submitted", style="cyan")
    table.add_column("Response Time (ms)", justify="right", style="green")
    for i, (label, value) in enumerate(controller.analytics_pairs(), 1):
        table.add_row(str(i), label, str(value))
    console.print(table)

    summary = controller.analytics_summary()
    if summary:
        console.print(
            f"[dim]{summary.count} requests, mean {summary.mean_ms:.0f} ms, "
            f"min {summary.min_ms} ms, max {summary.max_ms} ms[/dim]"
        )


def _print_debug(controller: ConversationController) -> None:
    console.print(Syntax(controller.debug_json(), "json", word_wrap=True))


def _print_history(controller: ConversationController) -> None:
    for message in controller.messages:
        who = "Bot" if message.role is Role.ASSISTANT else "You"
        task = f" [magenta]{message.task_kind.label}[/magenta]" if message.task_kind else ""
        stamp = message.created_at.strftime("%Y-%m-%d %H:%M:%S")
        console.print(f"[bold]{who}[/bold]{task} [dim]{stamp}[/dim]")
        console.print(Markdown(message.content) if message.role is Role.ASSISTANT else message.content)


@app.command()
def tasks():
    """List the supported task kinds."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Task", style="cyan")
    table.add_column("Label")
    table.add_column("Uses", style="dim")

    for spec in default_catalog:
        table.add_row(spec.kind.value, spec.label, ", ".join(spec.required_fields))

    console.print(table)


@app.command()
def prompt(
    question: str = typer.Argument("", help="Optional free-text question"),
    task: TaskKind | None = typer.Option(None, "--task", "-t", help="Task kind"),
    input_file: Path | None = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="Structured input JSON file"
    ),
    system: bool = typer.Option(False, "--system", "-s", help="Also show the system prompt"),
):
    """Show the prompt that would be sent, without calling the model."""
    data = load_input(input_file, console)

    if system:
        console.print(Panel(build_system_prompt(), title="System", border_style="dim"))
    console.print(Panel(PromptBuilder().build(task, data, question), title="Prompt"))


@app.command()
def ask(
    question: str = typer.Argument("", help="Question about your farm"),
    task: TaskKind | None = typer.Option(None, "--task", "-t", help="Task kind"),
    input_file: Path | None = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="Structured input JSON file"
    ),
    gateway: str | None = typer.Option(
        None, "--gateway", "-g", help="Gateway variant: routed or streaming"
    ),
    export: Path | None = typer.Option(
        None, "--export", "-e", file_okay=False, help="Directory to save the history to"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show controller logs"),
):
    """Ask a single question and stream the answer."""
    if task is None and not question.strip():
        console.print("[yellow]Give a question or a --task to run[/yellow]")
        raise typer.Exit(code=1)

    async def _ask():
        config = get_config(console, gateway=gateway)
        data = load_input(input_file, console)
        controller = build_controller(config)
        if verbose:
            controller.set_debug_callback(console_debug_callback(console, LogLevel.DEBUG))

        try:
            await run_submission(controller, task, data, question)
            if controller.last_error is not None:
                raise typer.Exit(code=1)
            _print_latency(controller)

            if export is not None:
                path = controller.save_transcript(export)
                console.print(f"[green]History saved to {path}[/green]")
        except AquanetError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await controller.close()

    asyncio.run(_ask())


@app.command()
def chat(
    task: TaskKind | None = typer.Option(None, "--task", "-t", help="Initial task kind"),
    input_file: Path | None = typer.Option(
        None, "--input", "-i", exists=True, dir_okay=False, help="Structured input JSON file"
    ),
    gateway: str | None = typer.Option(
        None, "--gateway", "-g", help="Gateway variant: routed or streaming"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show controller logs"),
):
    """Interactive chat session."""
    async def _chat():
        config = get_config(console, gateway=gateway)
        data = load_input(input_file, console)
        controller = build_controller(config)
        if verbose:
            controller.set_debug_callback(console_debug_callback(console, LogLevel.INFO))

        current_task = task
        console.print(Panel(CHAT_HELP, title="Aquanet chat", border_style="cyan"))

        try:
            while True:
                label = current_task.label if current_task else "FREE TEXT"
                line = await asyncio.to_thread(console.input, f"[bold]You[/bold] [dim]({label})[/dim]: ")
                line = line.strip()

                if line in ("/quit", "/exit"):
                    break
                if line == "/help":
                    console.print(CHAT_HELP)
                elif line.startswith("/task"):
                    value = line[len("/task"):].strip()
                    if value in ("", "none"):
                        current_task = None
                    elif value in default_catalog:
                        current_task = TaskKind(value)
                    else:
                        console.print(f"[red]Unknown task: {value}[/red]")
                elif line == "/reset":
                    controller.reset()
                    console.print("[dim]History cleared[/dim]")
                elif line.startswith("/save"):
                    directory = Path(line[len("/save"):].strip() or ".")
                    path = controller.save_transcript(directory)
                    console.print(f"[green]History saved to {path}[/green]")
                elif line == "/debug":
                    _print_debug(controller)
                elif line == "/analytics":
                    _print_analytics(controller)
                elif line == "/history":
                    _print_history(controller)
                elif line.startswith("/"):
                    console.print(f"[yellow]Unknown command: {line}[/yellow]")
                elif current_task is None and not line:
                    continue
                else:
                    await run_submission(controller, current_task, data, line)
                    _print_latency(controller)
        except (EOFError, KeyboardInterrupt):
            console.print()
        except AquanetError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await controller.close()

    asyncio.run(_chat())


if __name__ == "__main__":
    app()
