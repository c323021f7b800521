import asyncio
import logging
from typing import Optional

import typer
from rich.console import Console

from wiki_linker.config import LinkerConfig, MAX_WORKERS, NamespaceFilter
from wiki_linker.exceptions import WikiLinkerException
from wiki_linker.logging_config import setup_logging
from wiki_linker.models import SearchResult
from wiki_linker.solver import BidirectionalSearch
from wiki_linker.storage import ResultWriter
from wiki_linker.wikipedia import MediaWikiClient

DEFAULT_START = "Tacoma Narrows Bridge"
DEFAULT_END = "24-Hour Analog Dial"

app = typer.Typer()
console = Console()
logger = logging.getLogger(__name__)


@app.command()
def main(
    start: str = typer.Option(DEFAULT_START, "--start", "-s", help="Title of the page to start from."),
    end: str = typer.Option(DEFAULT_END, "--end", "-e", help="Title of the page to reach."),
    domain: Optional[str] = typer.Option(
        None, "--domain", "-d", help="MediaWiki host and script path, e.g. en.wikipedia.org/w."
    ),
    extended: Optional[bool] = typer.Option(
        None, "--extended/--articles-only", help="Also follow category and portal pages."
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", "-w", min=1, max=MAX_WORKERS, help="Concurrent page queries per pass."
    ),
    output_dir: Optional[str] = typer.Option(
        None, "--output-dir", "-o", help="Directory for the result listing."
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Prompt for every setting."
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="DEBUG, INFO, WARNING or ERROR."),
    plain_logs: bool = typer.Option(False, "--plain-logs", help="Log without Rich formatting."),
):
    """
    Find the link paths connecting two wiki pages.
    """
    setup_logging(level=log_level, use_rich=not plain_logs)

    namespaces = None
    if extended is not None:
        namespaces = NamespaceFilter.EXTENDED if extended else NamespaceFilter.ARTICLES
    config = LinkerConfig.from_env(
        domain=domain, namespaces=namespaces, workers=workers, output_dir=output_dir
    )

    if interactive:
        config, start, end = prompt_for_settings(config, start, end)

    exit_code = asyncio.run(run_search_async(config, start, end))
    raise typer.Exit(code=exit_code)


def prompt_for_settings(config: LinkerConfig, start: str, end: str):
    """Ask for the search settings, offering the current values as defaults."""
    domain = typer.prompt("Enter a domain", default=config.domain)
    start = typer.prompt("Enter a starting page", default=start)
    end = typer.prompt("Enter an ending page", default=end)
    extended = typer.confirm(
        "Allow extended namespaces? (if unsure answer yes)",
        default=config.namespaces == NamespaceFilter.EXTENDED,
    )
    workers = 0
    while not 1 <= workers <= MAX_WORKERS:
        workers = typer.prompt(f"Threads to batch? (1-{MAX_WORKERS})", default=config.workers, type=int)
    config = LinkerConfig(**{
        **config.model_dump(),
        "domain": domain,
        "namespaces": NamespaceFilter.EXTENDED if extended else NamespaceFilter.ARTICLES,
        "workers": workers,
    })
    return config, start, end


async def run_search_async(config: LinkerConfig, start: str, end: str) -> int:
    """Run one search against the live wiki and report it. Returns the exit code."""
    logger.info(f"Using {config.api_url} with namespaces {config.namespaces.value} and {config.workers} workers")

    async with MediaWikiClient(config) as client:
        search = BidirectionalSearch(client, workers=config.workers)
        try:
            result = await search.run(start, end)
        except WikiLinkerException as e:
            logger.error(e.message)
            console.print(f"[red]{e.message}[/red]")
            return 1

    report(result, ResultWriter(config.output_path))
    return 0


def report(result: SearchResult, writer: ResultWriter):
    """Print the result listing; found paths are also written to a file."""
    for line in result.lines():
        console.print(line, markup=False, highlight=False, soft_wrap=True)

    if result.found:
        path = writer.write(result)
        console.print(f"Saved to {path}", style="dim", soft_wrap=True)


if __name__ == "__main__":
    app()
