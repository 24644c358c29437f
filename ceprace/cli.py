import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel

from ceprace.config import Settings, load_settings
from ceprace.exceptions import MissingCep
from ceprace.lookup import CepLookup
from ceprace.race import RaceAllFailed, RaceResult, RaceTimeout

app = typer.Typer(help="ceprace: ask ViaCEP and BrasilAPI at once, keep the fastest answer")
console = Console()


@app.callback()
def root() -> None:
    pass


def _settings(config: Optional[Path], **overrides) -> Settings:
    settings = load_settings(config)
    changes = {k: v for k, v in overrides.items() if v is not None}
    if changes:
        settings = settings.model_copy(update=changes)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return settings


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to listen on"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="Path to ceprace.yaml"),
) -> None:
    """Run the HTTP service (GET /?cep=...)."""
    import uvicorn

    from ceprace.service.main import create_app

    settings = _settings(config, host=host, port=port)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


async def _lookup_once(settings: Settings, cep: str) -> RaceResult:
    lookup = CepLookup(settings)
    try:
        return await lookup.lookup(cep)
    finally:
        await lookup.aclose()


@app.command("lookup")
def lookup(
    cep: str = typer.Argument(..., help="Postal code to look up"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", min=0.001, help="Race deadline in seconds"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, readable=True, help="Path to ceprace.yaml"),
) -> None:
    """Run a single race from the command line and print the winner."""
    settings = _settings(config, timeout=timeout)

    try:
        result = asyncio.run(_lookup_once(settings, cep))
    except MissingCep as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(2)
    except RaceTimeout:
        console.print("[bold red]Timeout reached[/bold red] while fetching data")
        raise typer.Exit(1)
    except RaceAllFailed:
        console.print("[bold red]Error:[/bold red] every lookup service failed")
        raise typer.Exit(1)

    body = "null" if result.payload is None else result.payload.model_dump_json()
    console.print(Panel(JSON(body), title=f"{result.contender} response"))
