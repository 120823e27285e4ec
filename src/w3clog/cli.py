from __future__ import annotations

# ---- Environment bootstrap (MUST be first) ----
from dotenv import load_dotenv

# Load .env once at process start
load_dotenv()

# ---- CLI imports ----
from typing import List, Optional

import typer

from .accumulator import FieldAccumulator
from .config import W3CConfig
from .formatter import DEFAULT_FORMATTER
from .reporter import utc_now
from .schemas import parse_text_value
from .sinks import FileSink, StreamSink
from .utils.ui import print_header, setup_logging


app = typer.Typer(add_completion=False, help="W3C Extended Log Format writer")


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, help="Diagnostic log level (default from W3C_LOG_LEVEL)"),
):
    """
    W3C Extended Log Format writer
    """
    setup_logging(log_level or W3CConfig().log_level)


@app.command()
def header(fields: List[str] = typer.Argument(..., help="Field names, in column order")):
    """Print the header block for FIELDS."""
    line = DEFAULT_FORMATTER.fields_header_line(fields)
    crc = DEFAULT_FORMATTER.checksum(line)
    typer.echo(DEFAULT_FORMATTER.header_block(line, crc, utc_now()), nl=False)


@app.command()
def checksum(text: str = typer.Argument(..., help="Exact header text, e.g. '#Fields: ip bytes'")):
    """Print the CRC-32 of TEXT as written in #CRC lines."""
    typer.echo(DEFAULT_FORMATTER.checksum(text))


def _parse_pairs(pairs: List[str]) -> List[tuple]:
    parsed = []
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"expected NAME=VALUE, got {pair!r}")
        parsed.append((name, value))
    return parsed


@app.command()
def emit(
    pairs: List[str] = typer.Argument(..., help="NAME=VALUE pairs; repeated names accumulate"),
    fields: str = typer.Option("", help="Comma-separated column order"),
    log_path: Optional[str] = typer.Option(None, help="Log file (default from W3C_LOG_PATH)"),
    stdout: bool = typer.Option(False, "--stdout", help="Write to stdout instead of the log file"),
):
    """
    Record NAME=VALUE pairs as one unit of work and write its W3C line.
    """
    cfg = W3CConfig()
    parsed = _parse_pairs(pairs)

    columns = [f.strip() for f in fields.split(",") if f.strip()] or cfg.fields
    if not columns:
        columns = list(dict.fromkeys(name for name, _ in parsed))

    sink = StreamSink() if stdout else FileSink(log_path or cfg.log_path)
    acc = FieldAccumulator(columns, sink=sink, header_repeat_ms=cfg.header_repeat_ms)

    with acc.scoped():
        for name, value in parsed:
            acc.record(name, parse_text_value(value))

    if not stdout:
        print_header("w3clog", f"appended 1 line to {sink.log_path}")


if __name__ == "__main__":
    app()
