"""Rich renderers for CLI output. Nothing here talks to AWS, the API or the database."""

from datetime import datetime
from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ragtime.models.analysis import AnalysisReport, PipelineVerdict, Section, SectionState
from ragtime.models.document import Document, DocumentList, DocumentStatus

STATUS_COLORS = {
    DocumentStatus.PROCESSED: "green",
    DocumentStatus.FAILED: "red",
}

SECTION_LABELS = {
    SectionState.PRESENT: ("✅ Present", "green"),
    SectionState.EMPTY: ("⚠️  Present but empty", "yellow"),
    SectionState.ABSENT: ("❌ Not found", "yellow"),
    SectionState.FAILED: ("❌ Lookup failed", "red"),
    SectionState.MISSING_REFERENCE: ("⚠️  No S3 reference on record", "yellow"),
    SectionState.SKIPPED: ("Skipped", "dim"),
}

VERDICT_STYLES = {
    PipelineVerdict.FULLY_PROCESSED: ("✅ Document fully processed", "green"),
    PipelineVerdict.FAILED: ("❌ Document processing failed", "red"),
    PipelineVerdict.INCOMPLETE: ("⚠️  Document processing incomplete", "yellow"),
}


def status_text(status: DocumentStatus) -> Text:
    return Text(status.value, style=STATUS_COLORS.get(status, "yellow"))


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "N/A"
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def format_kb(size: int) -> str:
    return f"{size / 1024:.1f}KB"


def format_mb(size: int) -> str:
    return f"{size / 1024 / 1024:.2f}MB"


def truncate(value: str, length: int) -> str:
    return value if len(value) <= length else value[:length] + "..."


def documents_table(listing: DocumentList) -> Table:
    table = Table(box=box.ROUNDED)
    table.add_column("ID", style="yellow", no_wrap=True)
    table.add_column("NAME", style="cyan")
    table.add_column("STATUS")
    table.add_column("UPLOADED")
    table.add_column("SIZE", justify="right")

    for doc in listing.documents:
        table.add_row(
            truncate(doc.asset_id, 12),
            doc.file_name,
            status_text(doc.status),
            format_timestamp(doc.created_at),
            format_kb(doc.file_size),
        )
    return table


def print_document_list(console: Console, listing: DocumentList) -> None:
    if not listing.documents:
        console.print("[yellow]No documents found.[/yellow]")
        return
    console.print(documents_table(listing))
    console.print(f"\nTotal: {len(listing.documents)} documents")


def print_upload_result(console: Console, doc: Document) -> None:
    console.print("[green]✓ Upload complete[/green]")
    console.print(f"Document ID: [yellow]{doc.asset_id}[/yellow]")
    console.print(f"Status: [cyan]{doc.status.value}[/cyan]")
    console.print(f"Filename: {doc.file_name}")
    console.print(f"Size: {format_kb(doc.file_size)}")


def print_document_details(console: Console, doc: Document) -> None:
    console.print(f"Document: [yellow]{doc.asset_id}[/yellow]")
    console.print(f"Name: {doc.file_name}")
    console.print(Text("Status: ").append(status_text(doc.status)))
    console.print(f"Size: {format_mb(doc.file_size)}")
    console.print(f"Uploaded: {format_timestamp(doc.created_at)}")
    console.print(f"Content Type: {doc.content_type}")
    if doc.word_count:
        console.print(f"Word Count: {doc.word_count}")
    if doc.error_message:
        console.print(Text("Error: ").append(doc.error_message, style="red"))


def section_state_text(section: Section) -> Text:
    label, style = SECTION_LABELS[section.state]
    return Text(label, style=style)


def _section_table(title: str, section: Section) -> Table:
    table = Table(title=title, box=box.ROUNDED, title_justify="left")
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")
    table.add_row("State", section_state_text(section))
    if section.error:
        table.add_row("Error", Text(section.error, style="red"))
    return table


def storage_table(report: AnalysisReport) -> Table:
    doc = report.document
    table = _section_table("S3 Storage", report.storage)
    if doc.storage_location:
        table.add_row("Location", str(doc.storage_location))
    info = report.storage.data
    if info is not None and info.exists:
        table.add_row("Size", format_kb(info.size or 0))
        table.add_row("Last Modified", format_timestamp(info.last_modified))
        table.add_row("Content Type", info.content_type or "N/A")
    return table


def relational_table(report: AnalysisReport) -> Table:
    table = _section_table("PostgreSQL Record", report.relational)
    record = report.relational.data
    if record is not None:
        table.add_row("Status", record.status or "N/A")
        table.add_row("Total Chunks", str(record.total_chunks))
        if record.correlation_id:
            table.add_row("Correlation ID", record.correlation_id)
        table.add_row("Created", format_timestamp(record.created_at))
        if record.error_message:
            table.add_row("Record Error", Text(record.error_message, style="red"))
    return table


def embeddings_table(report: AnalysisReport) -> Table:
    table = _section_table("Embeddings", report.embeddings)
    stats = report.embeddings.data
    if stats is not None:
        table.add_row("Total Embeddings", str(stats.total_embeddings))
        table.add_row("Unique Chunks", str(stats.unique_chunks))
        table.add_row("Avg Content Length", f"{stats.avg_content_length:.0f} chars")
        table.add_row("First Embedding", format_timestamp(stats.first_embedding))
        table.add_row("Last Embedding", format_timestamp(stats.last_embedding))
    return table


def chunks_table(report: AnalysisReport) -> Optional[Table]:
    stats = report.embeddings.data
    if stats is None or not stats.chunks:
        return None
    table = Table(title="Chunk Previews", box=box.SIMPLE, title_justify="left")
    table.add_column("#", justify="right", style="cyan")
    table.add_column("Content")
    table.add_column("Created")
    for chunk in stats.chunks:
        table.add_row(
            str(chunk.chunk_index),
            truncate(" ".join(chunk.content.split()), 80),
            format_timestamp(chunk.created_at),
        )
    return table


def print_analysis_report(console: Console, report: AnalysisReport) -> None:
    doc = report.document
    console.print(f"Document: {doc.file_name} ([yellow]{doc.asset_id}[/yellow])")
    console.print(Text("Status: ").append(status_text(doc.status)))
    if doc.word_count:
        console.print(f"Words: {doc.word_count}")
    if doc.processing_seconds is not None:
        console.print(f"Processing time: {doc.processing_seconds}s")
    if doc.error_message:
        console.print(Text("Error: ").append(doc.error_message, style="red"))

    if report.detailed:
        console.print()
        console.print(storage_table(report))
        if report.storage_preview:
            console.print(Panel(report.storage_preview, title="Content Preview", box=box.ROUNDED))
        if report.degraded:
            console.print(
                "[yellow]Analysis endpoint unavailable; PostgreSQL and embedding details omitted.[/yellow]"
            )
        else:
            console.print(relational_table(report))
            console.print(embeddings_table(report))
            previews = chunks_table(report)
            if previews is not None:
                console.print(previews)

    label, style = VERDICT_STYLES[report.verdict]
    console.print(Panel(Text(label, style=f"bold {style}"), title="Pipeline Verdict", box=box.ROUNDED))


def get_status_color(status: str) -> str:
    """Get color for status display"""
    if status == "healthy":
        return "green"
    elif status in ["connection_error", "error"]:
        return "red"
    elif status in ["schema_error", "api_error"]:
        return "yellow"
    else:
        return "blue"


def format_status_response(service_name: str, response: Dict[str, Any]) -> Table:
    """Format service status response as a rich table"""
    table = Table(title=f"{service_name} Status", box=box.ROUNDED)
    table.add_column("Property", style="cyan", no_wrap=True)
    table.add_column("Value", style="magenta")

    connected = response.get("connected", False)
    status = response.get("status", "unknown")

    table.add_row("Connected", "✅ Yes" if connected else "❌ No")
    table.add_row("Status", Text(status, style=get_status_color(status)))
    table.add_row("Message", response.get("message", "N/A"))

    if response.get("host"):
        table.add_row("Host", str(response["host"]))
    if "port" in response:
        table.add_row("Port", str(response["port"]))
    if "database" in response:
        table.add_row("Database", response["database"])
    if "endpoint_url" in response:
        table.add_row("Endpoint", response["endpoint_url"])
    if response.get("pgvector"):
        table.add_row("pgvector", response["pgvector"])
    if "tables" in response:
        table.add_row("Tables", ", ".join(response["tables"]) or "none")

    if "error" in response:
        table.add_row("Error", Text(response["error"], style="red"))

    return table
