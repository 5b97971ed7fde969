#!/usr/bin/env python3
"""
RagTime CLI for document management.

Usage:
    ragtime upload ./report.pdf
    ragtime upload --string "some text" --name notes.txt
    ragtime list
    ragtime get <document-id> --status
    ragtime delete <document-id>
    ragtime health
"""

import asyncio
from pathlib import Path
from typing import Awaitable, Optional

import typer
from loguru import logger
from rich.console import Console

from ragtime import __version__
from ragtime.cli import presenters
from ragtime.cli.upload_source import SourceKind, UploadSourceError, resolve_upload_source
from ragtime.errors import ConfigurationError, NotFoundError
from ragtime.services.factory import open_analysis_service, open_api_client, open_document_adapter
from ragtime.services.status_service import ApiStatusService, PostgresStatusService
from ragtime.utils.logging import configure_logging

app = typer.Typer(
    name="ragtime",
    help="RagTime CLI for document management",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def handle_error(error: Exception, operation: str) -> None:
    """Print a concise message and exit non-zero"""
    if isinstance(error, NotFoundError):
        err_console.print("[red]Document not found[/red]")
    elif isinstance(error, ConfigurationError):
        err_console.print(f"[red]Configuration error:[/red] {error}")
    else:
        err_console.print(f"[red]{operation} failed:[/red] {error}")
    logger.debug(f"{operation} failed: {error!r}")
    raise typer.Exit(1)


def run_command(coro: Awaitable[None], operation: str) -> None:
    try:
        asyncio.run(coro)
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        handle_error(e, operation)


def version_callback(value: bool) -> None:
    if value:
        console.print(f"ragtime {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=version_callback, is_eager=True, help="Show version and exit"
    ),
):
    """RagTime CLI for document management"""
    configure_logging(verbose)


@app.command()
def upload(
    input_value: Optional[str] = typer.Argument(None, metavar="[INPUT]", help="File path, URL, or text content to upload"),
    file: Optional[str] = typer.Option(None, "--file", "-f", help="Upload from file path"),
    string: Optional[str] = typer.Option(None, "--string", "-s", help="Upload text content directly"),
    url: Optional[str] = typer.Option(None, "--url", "-u", help="Upload content from URL"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Custom filename for string/URL content"),
):
    """Upload a document"""
    try:
        source = resolve_upload_source(input_value, file=file, string=string, url=url, name=name)
    except UploadSourceError as e:
        err_console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    async def _upload():
        async with open_api_client() as client:
            if source.kind == SourceKind.FILE:
                console.print(f"[blue]Uploading file: {source.value}...[/blue]")
                content = Path(source.value).read_bytes()
                file_name = source.name or Path(source.value).name
                document = await client.upload_file(file_name, content, source.content_type)
            elif source.kind == SourceKind.STRING:
                console.print(f"[blue]Uploading text content as: {source.name}...[/blue]")
                document = await client.upload_string(source.value, source.name)
            else:
                console.print(f"[blue]Uploading content from URL: {source.value}...[/blue]")
                document = await client.upload_url(source.value, file_name=source.name)
        presenters.print_upload_result(console, document)

    run_command(_upload(), "Upload")


@app.command("list")
def list_documents():
    """List all documents"""

    async def _list():
        async with open_api_client() as client:
            listing = await client.list_documents()
        presenters.print_document_list(console, listing)

    run_command(_list(), "List")


@app.command()
def get(
    document_id: str = typer.Argument(..., help="Document ID to retrieve"),
    status: bool = typer.Option(False, "--status", "-s", help="Show detailed processing status across S3, PostgreSQL and embeddings"),
):
    """Get document details"""

    async def _get():
        async with open_api_client() as client:
            if not status:
                document = await client.get_document(document_id)
                presenters.print_document_details(console, document)
                return
            async with open_analysis_service(client) as service:
                report = await service.analyze(document_id, detailed=True)
        presenters.print_analysis_report(console, report)

    run_command(_get(), "Get")


@app.command()
def delete(document_id: str = typer.Argument(..., help="Document ID to delete")):
    """Delete a document"""

    async def _delete():
        async with open_api_client() as client:
            await client.delete_document(document_id)
        console.print(f"[green]Document {document_id} deleted successfully[/green]")

    run_command(_delete(), "Delete")


@app.command()
def health(
    skip_database: bool = typer.Option(False, "--skip-database", help="Only check the REST API"),
):
    """Check the RagTime API and the pgvector database"""

    async def _health():
        async with open_api_client() as client:
            console.print("[cyan]Checking RagTime API...[/cyan]")
            api_result = await ApiStatusService(client).check_status()
            response = api_result.unwrap() if api_result.is_ok() else api_result.unwrap_err()
            console.print(presenters.format_status_response("RagTime API", response))
            healthy = api_result.is_ok()

        if not skip_database:
            console.print("[cyan]Checking PostgreSQL...[/cyan]")
            async with open_document_adapter() as adapter:
                db_result = await PostgresStatusService(adapter).check_status()
            response = db_result.unwrap() if db_result.is_ok() else db_result.unwrap_err()
            console.print(presenters.format_status_response("PostgreSQL", response))
            healthy = healthy and db_result.is_ok() and response.get("status") == "healthy"

        if not healthy:
            raise typer.Exit(1)

    run_command(_health(), "Health check")


if __name__ == "__main__":
    app()
