#!/usr/bin/env python3
"""
Console interface for dataset analysis.
Runs the upload analysis pipeline against a local file and prints the
summary, KPIs and recommended charts.
"""

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.config import settings
from .core.errors import AnalysisError
from .core.logging_config import configure_logging
from .domain.analysis.assembler import AnalysisResult
from .domain.analysis.client import GeminiAnalysisClient
from .domain.analysis.pipeline import AnalysisLimits, describe_limits, run_analysis


class AnalysisConsole:
    """Terminal front end for one-off file analysis."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_welcome(self, limits: AnalysisLimits):
        welcome_text = Text("📊 DataLens", style="bold blue")
        body = "\n".join(f"• {line}" for line in describe_limits(limits))
        self.console.print(Panel.fit(
            f"[green]AI analysis for CSV and Excel files[/green]\n\n{body}\n\n"
            f"[dim]Model: {settings.gemini_model}[/dim]",
            title=welcome_text,
            border_style="blue"
        ))

    def print_error(self, error: AnalysisError):
        message = error.error
        if error.detail:
            message += f"\n{error.detail}"
        self.console.print(Panel(
            f"[red]❌ {message}[/red]",
            title="Error",
            border_style="red"
        ))

    def print_result(self, result: AnalysisResult, preview_rows: int = 10):
        self.console.print(Panel(
            Text(result.summary),
            title=f"Summary ({result.total_rows} rows, {len(result.columns)} columns)",
            border_style="green"
        ))

        if result.kpis:
            kpi_table = Table(title="Key Performance Indicators")
            kpi_table.add_column("#", style="dim", justify="right")
            kpi_table.add_column("KPI", style="cyan")
            for idx, kpi in enumerate(result.kpis, start=1):
                kpi_table.add_row(str(idx), kpi)
            self.console.print(kpi_table)

        chart_table = Table(title="Recommended Charts")
        for column in ("Type", "X", "Y", "Title", "Insight"):
            chart_table.add_column(column)
        known_columns = set(result.columns)
        for chart in result.charts:
            # Axis names the dataset doesn't have render as empty charts on the dashboard
            x = chart.x if chart.x in known_columns else f"[yellow]{chart.x}[/yellow]"
            y = chart.y if chart.y in known_columns else f"[yellow]{chart.y}[/yellow]"
            chart_table.add_row(chart.type, x, y, chart.title, chart.insight)
        self.console.print(chart_table)

        if preview_rows > 0:
            data_table = Table(title=f"Data preview (first {min(preview_rows, result.total_rows)} rows)")
            data_table.add_column("#", style="dim", justify="right")
            for column in result.columns:
                data_table.add_column(column, style="white")
            for idx, row in enumerate(result.raw_data[:preview_rows], start=1):
                data_table.add_row(str(idx), *(str(row.get(column, "")) for column in result.columns))
            self.console.print(data_table)

    def run(self, file_path: str, limits: AnalysisLimits, as_json: bool = False, preview_rows: int = 10) -> int:
        path = Path(file_path)
        if not path.is_file():
            self.console.print(f"[red]File not found: {file_path}[/red]")
            return 2

        if not as_json:
            self.print_welcome(limits)

        try:
            with GeminiAnalysisClient.from_settings(settings) as client:
                if as_json:
                    result = run_analysis(path.read_bytes(), path.name, client, limits)
                else:
                    with self.console.status(f"Analyzing {path.name}...", spinner="dots"):
                        result = run_analysis(path.read_bytes(), path.name, client, limits)
        except AnalysisError as e:
            if as_json:
                print(json.dumps(e.to_payload()))
            else:
                self.print_error(e)
            return 1

        if as_json:
            print(json.dumps({"success": True, **result.model_dump(by_alias=True)}, default=str))
        else:
            self.print_result(result, preview_rows=preview_rows)
        return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Analyze a CSV/Excel file with Gemini")
    parser.add_argument("file", help="Path to a .csv, .xlsx, .xls or .txt file")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON result")
    parser.add_argument("--max-rows", type=int, default=None, help="Rows sent to the model")
    parser.add_argument("--preview", type=int, default=10, help="Data rows to display")
    parser.add_argument("--strict-charts", action="store_true",
                        help="Fail when a chart names a column the file doesn't have")
    args = parser.parse_args(argv)

    configure_logging(settings.log_level)

    limits = AnalysisLimits.from_settings(settings)
    overrides = {}
    if args.max_rows is not None:
        overrides["max_rows"] = args.max_rows
    if args.strict_charts:
        overrides["strict_charts"] = True
    if overrides:
        limits = replace(limits, **overrides)

    return AnalysisConsole().run(args.file, limits, as_json=args.json, preview_rows=args.preview)


if __name__ == "__main__":
    sys.exit(main())
