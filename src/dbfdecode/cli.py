from pathlib import Path
from typing import Any

import orjson
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table as RichTable

from dbfdecode.diagnostics import describe_table
from dbfdecode.errors import DBFError
from dbfdecode.export import records_to_arrow, records_to_csv, records_to_jsonl
from dbfdecode.options import OpenOptions, ReadMode, load_options
from dbfdecode.table import open_table
from dbfdecode.utils.logging import configure_logging

app = typer.Typer(help="Decode dBase / FoxPro tables into structured records.")
console = Console()
SUPPORTED_FORMATS = {"json", "jsonl", "arrow", "csv"}


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING, ..."),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit logs as JSON lines."),
) -> None:
    configure_logging(level=log_level, json_logs=json_logs)


def _require_file(path: Path) -> Path:
    if not path.is_file():
        raise typer.BadParameter(f"Input file not found: {path}")
    return path


def _print_json(payload: Any) -> None:
    text = orjson.dumps(payload, option=orjson.OPT_INDENT_2, default=str).decode()
    console.print(text, markup=False, highlight=False, soft_wrap=True)


def _build_options(
    options_file: Path | None,
    loose: bool,
    include_deleted: bool,
    encoding: str | None,
    field_encoding: list[str] | None,
) -> OpenOptions:
    opts = load_options(_require_file(options_file)) if options_file else OpenOptions()
    if loose:
        opts.read_mode = ReadMode.LOOSE
    if include_deleted:
        opts.include_deleted = True
    if encoding:
        opts.encoding.default = encoding
    for entry in field_encoding or []:
        if "=" not in entry:
            raise typer.BadParameter("Field encoding must be NAME=ENCODING")
        name, enc = entry.split("=", 1)
        opts.encoding.per_field[name.strip()] = enc.strip()
    return opts


@app.command()
def info(
    input: Path = typer.Argument(..., help="Table file (.dbf) to inspect."),
    options: Path | None = typer.Option(
        None, "--options", help="YAML/JSON file with open options (encoding is used)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the summary as JSON."),
) -> None:
    """Show header metadata, field layout and structural warnings."""
    _require_file(input)
    if options is not None:
        _require_file(options)
    summary = describe_table(input, load_options(options) if options else None)
    if as_json:
        _print_json(summary)
        return

    console.print(f"[bold]{summary['path']}[/] ({summary['size_bytes']} bytes)")
    if summary.get("error"):
        console.print(f"[bold red]Unreadable:[/] {escape(summary['error'])}")
        raise typer.Exit(code=1)
    console.print(
        f"version 0x{summary['version']:02x} ({summary['version_label']}), "
        f"{summary['record_count']} records, last update {summary['last_update']}"
    )
    console.print(
        f"header {summary['header_length']} bytes, record {summary['record_length']} bytes, "
        f"memo {summary['memo_path'] or '-'}"
    )
    grid = RichTable("name", "type", "size", "decimals")
    for field in summary["fields"]:
        grid.add_row(
            field["name"], field["type"], str(field["size"]), str(field["decimal_places"])
        )
    console.print(grid)
    for message in summary["field_errors"]:
        console.print(f"[yellow]field:[/] {escape(message)}")
    if summary["warnings"]:
        console.print(f"[bold yellow]Warnings:[/] {', '.join(summary['warnings'])}")
    else:
        console.print("[bold green]No warnings[/]")


@app.command()
def read(
    input: Path = typer.Argument(..., help="Table file (.dbf) to decode."),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Optional path to write decoded records."
    ),
    format: str = typer.Option(
        "json", "--format", "-f", help="Output format: json | jsonl | arrow | csv."
    ),
    max_records: int = typer.Option(0, "--max", "-n", help="Records to read; 0 reads all."),
    loose: bool = typer.Option(False, "--loose", help="Null/skip bad data instead of failing."),
    include_deleted: bool = typer.Option(
        False, "--include-deleted", help="Keep deleted records, flagged with _deleted."
    ),
    encoding: str | None = typer.Option(
        None, "--encoding", "-e", help="Default text encoding (e.g. CP850, CP1252, UTF-8)."
    ),
    field_encoding: list[str] | None = typer.Option(
        None, "--field-encoding", help="Per-field override NAME=ENCODING (repeatable)."
    ),
    options: Path | None = typer.Option(
        None, "--options", help="YAML/JSON file with open options; flags override it."
    ),
) -> None:
    """Decode records from a table."""
    fmt = format.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise typer.BadParameter(f"Unsupported format '{format}'. Choose from {SUPPORTED_FORMATS}.")
    if fmt in {"arrow", "csv"} and output is None:
        raise typer.BadParameter(f"--output is required for {fmt} output.")

    _require_file(input)
    opts = _build_options(options, loose, include_deleted, encoding, field_encoding)
    try:
        table = open_table(input, opts)
        records = table.read_records(max_records)
    except (DBFError, OSError) as exc:
        console.print(f"[bold red]Failed to read {input}:[/] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if output is None:
        if fmt == "jsonl":
            for record in records:
                line = orjson.dumps(record).decode()
                console.print(line, markup=False, highlight=False, soft_wrap=True)
        else:
            _print_json(records)
        return

    if fmt == "json":
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(orjson.dumps(records, option=orjson.OPT_INDENT_2))
    elif fmt == "jsonl":
        records_to_jsonl(records, output)
    elif fmt == "arrow":
        records_to_arrow(records, table.fields, output)
    else:
        records_to_csv(records, table.fields, output)
    console.print(f"[bold green]Wrote[/] {len(records)} records to {output}")


if __name__ == "__main__":
    app()
