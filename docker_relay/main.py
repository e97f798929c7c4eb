# docker_relay/main.py
"""
docker-relay - Entrypoint
Typer CLI: serve the MCP server, or translate and run phrases locally
"""
import typer
from typing import Optional
from rich.console import Console
from rich.table import Table
from rich import print as rprint

from .common.config import get_config
from .common.logging_setup import configure_logging
from .cli.utils.decorators import async_command, handle_exceptions
from .core.command_executor import DockerCommandExecutor
from .core.translator import get_translator

app = typer.Typer(
    name="docker-relay",
    help="🐳 Natural language Docker commands over MCP",
    add_completion=False,
)

console = Console()


def _exit_with(code: int) -> None:
    if code:
        raise typer.Exit(code)


@app.command()
def version():
    """Show docker-relay version information"""
    config = get_config()
    rprint(f"[bold green]{config.server_name} v{config.version}[/bold green]")
    rprint("[dim]Natural language Docker commands over MCP[/dim]")


@app.command()
def serve(
    log_level: Optional[str] = typer.Option(None, "--log-level", "-l", help="Override DOCKER_RELAY_LOG_LEVEL"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Render logs as JSON lines on stderr"),
):
    """🚀 Serve the MCP tools over stdio"""
    from .server import serve as serve_stdio

    config = get_config()

    @handle_exceptions
    def _serve() -> int:
        configure_logging(log_level or config.log_level, json_logs or config.json_logs)
        serve_stdio(config)
        return 0

    _exit_with(_serve())


@app.command()
def translate(
    phrase: str = typer.Argument(..., help="Natural language phrase or docker command"),
    explain: bool = typer.Option(False, "--explain", "-e", help="Show which rule matched"),
):
    """🔤 Print the docker command a phrase translates to"""

    @handle_exceptions
    def _translate() -> int:
        rule, command = get_translator().explain(phrase)
        if not explain:
            console.print(command, markup=False, highlight=False)
            return 0

        table = Table(title="Translation")
        table.add_column("Phrase", style="cyan")
        table.add_column("Rule", style="magenta")
        table.add_column("Command", style="green")
        table.add_row(phrase, rule, command)
        console.print(table)
        return 0

    _exit_with(_translate())


@app.command()
def run(
    phrase: str = typer.Argument(..., help="Natural language phrase or docker command"),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Translate only, do not execute"),
    docker_host: Optional[str] = typer.Option(None, "--host", "-H", help="Docker host override for this call"),
):
    """▶️ Translate a phrase and execute it against docker"""
    config = get_config()

    @handle_exceptions
    @async_command
    async def _run() -> int:
        configure_logging(config.log_level, config.json_logs)
        command = get_translator().translate(phrase)
        rprint(f"[blue]Executing:[/blue] {command}")
        if dry_run:
            return 0

        executor = DockerCommandExecutor(config.executor)
        if docker_host:
            executor.docker_host = docker_host
        result = await executor.run(command)

        console.print(result.stdout, markup=False, highlight=False, end="")
        if result.stderr:
            rprint("[yellow]Warnings:[/yellow]")
            console.print(result.stderr, markup=False, highlight=False, end="")
        rprint(f"[dim]✓ {result.execution_time:.2f}s[/dim]")
        return 0

    _exit_with(_run())


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
