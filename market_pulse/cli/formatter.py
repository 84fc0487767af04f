"""
Output formatting for the market and news documents.
"""
import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

console = Console()

STATE_STYLES = {
    "strong_accumulation": "bold green",
    "accumulation": "green",
    "neutral": "yellow",
    "distribution": "red",
    "strong_distribution": "bold red",
}


class OutputFormatter:
    """Format job results for display."""

    @staticmethod
    def _color_code_signal(signal: str) -> str:
        """Apply color coding to signal and impact tags."""
        if signal in ("bullish", "long"):
            return f"[green]{signal}[/green]"
        elif signal in ("bearish", "short"):
            return f"[red]{signal}[/red]"
        elif signal in ("neutral", "neutre"):
            return f"[yellow]{signal}[/yellow]"
        else:
            return f"[dim]{signal}[/dim]"

    @staticmethod
    def _format_level(value: Optional[float]) -> str:
        return "-" if value is None else f"{value:,.0f}"

    @staticmethod
    def format_market(document: Dict[str, Any]) -> None:
        """
        Print the market state, contributing signals, trading plan and story.

        Args:
            document: Market document as persisted in ``data.json``.
        """
        analysis = document["analysis"]
        score = analysis["score"]
        style = STATE_STYLES.get(analysis["signal"], "white")

        content = (
            f"[{style}]{analysis['emoji']} {analysis['label']}[/{style}]\n\n"
            f"[bold]Bull:[/bold] {score['bull']}    [bold]Bear:[/bold] {score['bear']}    "
            f"[bold]Net:[/bold] {score['net']:+d}"
        )
        console.print(
            Panel(
                content,
                title="[*] Market Pulse",
                subtitle=f"Updated: {document['updatedAt'][:19]}",
                border_style=style,
            )
        )

        if analysis["signals"]:
            table = Table(title="Signals", show_header=True, header_style="bold magenta")
            table.add_column("Type", no_wrap=True)
            table.add_column("Weight", justify="right")
            table.add_column("Reason", style="dim")
            for entry in analysis["signals"]:
                table.add_row(
                    OutputFormatter._color_code_signal(entry["type"]),
                    str(entry["weight"]),
                    entry["reason"],
                )
            console.print(table)
        else:
            console.print("[yellow]No signal triggered[/yellow]")

        plan = document.get("tradingPlan")
        if plan:
            OutputFormatter._format_plan(plan)

        if document.get("story"):
            console.print(Panel(document["story"], title="Story", border_style="dim"))

    @staticmethod
    def _format_plan(plan: Dict[str, Any]) -> None:
        levels = plan["levels"]
        fmt = OutputFormatter._format_level

        table = Table(title="Trading Plan", show_header=False, box=None, padding=(0, 1))
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row(
            "Bias",
            f"{OutputFormatter._color_code_signal(plan['bias']['direction'])} ({plan['bias']['strength']})",
        )
        table.add_row("Horizon", plan["horizon"])
        if levels["entryZone"]:
            table.add_row("Entry", f"{fmt(levels['entryZone']['low'])} - {fmt(levels['entryZone']['high'])}")
            table.add_row("Invalidation", fmt(levels["invalidation"]))
            table.add_row("Targets", ", ".join(fmt(level) for level in levels["targets"]))
        table.add_row("Watch", f"S {fmt(levels['watch']['support'])} / R {fmt(levels['watch']['resistance'])}")
        table.add_row("Position size", plan["risk"]["positionSize"])
        console.print(table)

    @staticmethod
    def format_news(document: Dict[str, Any]) -> None:
        """
        Print the published news items and the narrative.

        Args:
            document: News document as persisted in ``news.json``.
        """
        news: List[Dict[str, Any]] = document.get("news", [])
        if not news:
            console.print("[yellow]No news to display[/yellow]")
        else:
            table = Table(title="News", show_header=True, header_style="bold magenta")
            table.add_column("Imp.", justify="right")
            table.add_column("Impact", no_wrap=True)
            table.add_column("Title")
            table.add_column("Source", style="dim")
            for item in news:
                table.add_row(
                    str(item["importance"]),
                    OutputFormatter._color_code_signal(item["impact"]),
                    item["title"],
                    item["source"],
                )
            console.print(table)

        if document.get("narrative"):
            console.print(Panel(document["narrative"], title="Narrative", border_style="dim"))

    @staticmethod
    def format_json(document: Dict[str, Any]) -> str:
        """
        Format a document as JSON.

        Returns:
            JSON string
        """
        return json.dumps(document, indent=2, ensure_ascii=False)

    @staticmethod
    def print_progress(message: str, emoji: str = "[*]") -> None:
        """Print a progress message."""
        console.print(f"{emoji} {message}", style="dim")

    @staticmethod
    def print_success(message: str) -> None:
        """Print a success message."""
        console.print(f"[OK] {message}", style="green")

    @staticmethod
    def print_error(message: str) -> None:
        """Print an error message."""
        console.print(f"[ERROR] {message}", style="red bold")

    @staticmethod
    def print_warning(message: str) -> None:
        """Print a warning message."""
        console.print(f"[WARN] {message}", style="yellow")
