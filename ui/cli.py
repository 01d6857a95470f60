"""Console interface for user interaction."""

import math
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, TypeVar

from rich.console import Console
from rich.errors import MarkupError
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table
from rich.text import Text

import config
from core.formatter import format_response
from core.prompts import FieldSpec, TaskSpec
from core.rubric_parser import LEVEL_LABELS, LEVELS, DEFAULT_POINTS, RubricRow, level_text, total_points
from services.history_store import HistoryEntry
from services.usage_tracker import UsageCounters
from utils.logger import get_logger
from utils.error_handler import UserCancelledError

logger = get_logger()
console = Console()

T = TypeVar('T') # Generic type for selection items

# Progress bar settings: the bar is cosmetic and never reaches the cap on its own
PROGRESS_CAP = 90.0
PROGRESS_TIME_CONSTANT = 4.0
PROGRESS_TICK_SECONDS = 0.1

END_OF_INPUT = "."

# Stands in for "<" from the model text while formatter tags are mapped to console styles
_LT_PLACEHOLDER = "\ue000"

# Formatter markup -> rich console markup
_CONSOLE_TAGS = [
    ("<h2>", "\n[bold cyan]"),
    ("</h2>", "[/bold cyan]\n"),
    ("<strong>", "[bold]"),
    ("</strong>", "[/bold]"),
    ("<em>", "[italic]"),
    ("</em>", "[/italic]"),
    ('<span class="badge">', "[reverse magenta]"),
    ("</span>", "[/reverse magenta]"),
    ("</p><p>", "\n\n"),
    ("<br>", "\n"),
    ("<p>", ""),
    ("</p>", ""),
]

def display_welcome():
    """Displays a welcome message."""
    console.print(Panel(
        f"[bold green]Welcome to {config.PRODUCT_NAME}, your AI teaching assistant[/bold green]",
        title="Welcome",
        border_style="blue"
    ))
    console.print("Grade work, summarize articles, build rubrics and lesson plans with AI.")
    console.rule()

def display_farewell():
    """Displays a farewell message."""
    console.rule()
    console.print(f"[bold cyan]Thanks for using {config.PRODUCT_NAME}. Goodbye.[/bold cyan]")

def display_error(message: str):
    """Displays an error message in a standard format."""
    console.print(Panel(f"[bold red]Error:[/bold red] {escape(message)}", title="Error", border_style="red"))

def display_warning(message: str):
    """Displays a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

def display_success(message: str):
    """Displays a success message."""
    console.print(f"[green]Success:[/green] {escape(message)}")

def display_step(title: str, description: str):
    """Displays the header for a screen."""
    console.print(f"\n[bold blue]{escape(title)}:[/bold blue] {escape(description)}")
    console.rule()

def prompt_for_selection(items: List[T], display_func: Callable[[T], str], prompt_message: str) -> T:
    """Prompts the user to select an item from a list.

    Args:
        items: The list of items to choose from.
        display_func: A function that takes an item and returns a string representation for display.
        prompt_message: The message to display before the list.

    Returns:
        The selected item.

    Raises:
        UserCancelledError: If the user enters 0 or there is nothing to choose.
    """
    if not items:
        console.print("[yellow]No items available for selection.[/yellow]")
        raise UserCancelledError("Nothing to select.")

    console.print(prompt_message)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", width=4)
    table.add_column("Option", style="cyan")

    choices = []
    for i, item in enumerate(items):
        table.add_row(str(i + 1), escape(display_func(item)))
        choices.append(str(i + 1))

    console.print(table)
    console.print("Enter 0 to go back.")

    choice = IntPrompt.ask("Select option number", choices=choices + ["0"], show_choices=False)
    if choice == 0:
        raise UserCancelledError("User cancelled selection.")
    return items[choice - 1]

def confirm_action(message: str, default: bool = True) -> bool:
    """Asks the user for confirmation."""
    return Confirm.ask(message, default=default)

def ask(message: str, default: str = "") -> str:
    return Prompt.ask(message, default=default, show_default=bool(default))

def read_multiline(label: str, placeholder: str = "") -> str:
    """Reads lines until a line holding only END_OF_INPUT (or end of input)."""
    hint = f" ({escape(placeholder)})" if placeholder else ""
    console.print(f"[bold]{escape(label)}[/bold]{hint}")
    console.print(f"[dim]Finish with a line containing only '{END_OF_INPUT}'.[/dim]")
    lines = []
    while True:
        try:
            line = console.input()
        except EOFError:
            break
        if line.strip() == END_OF_INPUT:
            break
        lines.append(line)
    return "\n".join(lines)

def prompt_fields(task: TaskSpec) -> Dict[str, str]:
    """Collects a task's auxiliary fields in declaration order. Blank answers keep the default."""
    values: Dict[str, str] = {}
    for spec in task.fields:
        values[spec.key] = _prompt_field(spec)
    return values

def _prompt_field(spec: FieldSpec) -> str:
    if spec.multiline:
        return read_multiline(spec.label, spec.placeholder)
    return ask(f"{spec.label} [dim]({escape(spec.placeholder)})[/dim]", default=spec.default)

def cosmetic_percent(elapsed: float, cap: float = PROGRESS_CAP, time_constant: float = PROGRESS_TIME_CONSTANT) -> float:
    """Progress shown while a request is outstanding.

    Rises quickly at first and then flattens toward the cap; it is unrelated
    to real request progress and never reaches 100 on its own.
    """
    if elapsed <= 0:
        return 0.0
    return cap * (1 - math.exp(-elapsed / time_constant))

def run_with_progress(description: str, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Runs func on a single worker thread while animating a progress bar.

    The bar snaps to 100% once func returns. Exceptions raised by func are
    re-raised here after the bar is closed.
    """
    with ThreadPoolExecutor(max_workers=1) as executor:
        future = executor.submit(func, *args, **kwargs)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            console=console,
            transient=True,
        ) as progress:
            bar = progress.add_task(description, total=100)
            started = time.monotonic()
            while not future.done():
                progress.update(bar, completed=cosmetic_percent(time.monotonic() - started))
                time.sleep(PROGRESS_TICK_SECONDS)
            progress.update(bar, completed=100)
        return future.result()

def to_console_markup(text: str, rubric: bool = False) -> str:
    """Formats model text with the response formatter and maps its tags to console styles."""
    markup = format_response(escape(text).replace("<", _LT_PLACEHOLDER), rubric=rubric)
    for tag, style in _CONSOLE_TAGS:
        markup = markup.replace(tag, style)
    return markup.replace(_LT_PLACEHOLDER, "<")

def display_response(title: str, text: str, rubric: bool = False, formatted: bool = True):
    """Shows a generated result, formatted or exactly as received."""
    body = Text(text)
    if formatted:
        try:
            body = Text.from_markup(to_console_markup(text, rubric=rubric))
        except MarkupError as e:
            logger.warning(f"Could not style response for display, showing plain text: {e}")
    console.print(Panel(body, title=escape(title), border_style="green"))

def display_rubric_table(rows: List[RubricRow]):
    """Shows parsed rubric rows with per-level ranges and default descriptions."""
    table = Table(title="Rubric", show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("Assessment Criteria", style="cyan")
    table.add_column("Points/Weight", style="magenta", justify="center")
    level_styles = {"excellent": "green", "good": "blue", "satisfactory": "yellow", "needs_improvement": "red"}
    for level in LEVELS:
        table.add_column(LEVEL_LABELS[level], style=level_styles[level])

    for row in rows:
        criteria = f"[bold]{escape(row.criteria)}[/bold]"
        if row.description:
            criteria += f"\n[dim]{escape(row.description)}[/dim]"
        points = escape(row.points or DEFAULT_POINTS)
        if row.weight:
            points += f"\n{escape(row.weight)}"
        levels = [f"[bold]{row.level_range(level)}[/bold]\n{escape(level_text(row, level))}" for level in LEVELS]
        table.add_row(criteria, points, *levels)

    console.print(table)
    console.print(f"Total possible points: {total_points(rows)} points")

def display_history(entries: List[HistoryEntry]):
    """Displays a summary table of history entries."""
    if not entries:
        console.print("[yellow]No history items found.[/yellow]")
        return

    table = Table(title="History", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Feature", style="cyan")
    table.add_column("Saved", style="green")
    table.add_column("Input", style="white")

    for entry in entries:
        table.add_row(entry.id, escape(entry.feature), entry.timestamp.strftime("%Y-%m-%d %H:%M"), escape(entry.input))

    console.print(table)
    console.print(f"{len(entries)} item(s).")

def display_history_entry(entry: HistoryEntry, preview_chars: int = 500):
    """Shows one entry; long content is cut to a preview."""
    content = entry.content
    if len(content) > preview_chars:
        content = content[:preview_chars] + "..."
    console.print(Panel(
        escape(content),
        title=f"{escape(entry.feature)} ({entry.timestamp.strftime('%Y-%m-%d %H:%M')})",
        border_style="cyan",
    ))

def display_usage(counters: UsageCounters, stats: Dict[str, Any]):
    """Displays usage counters and history statistics."""
    table = Table(title="Usage", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Total calls", str(counters.total_calls))
    table.add_row("Today", str(counters.today_calls))
    table.add_row("This week", str(counters.this_week_calls))
    table.add_row("This month", str(counters.this_month_calls))
    table.add_row("Saved generations", str(stats["total_generations"]))
    table.add_row("Features used", str(stats["features_used"]))
    table.add_row("Most used feature", escape(stats["most_used_feature"]))
    last = stats["last_activity"]
    table.add_row("Last activity", last.strftime("%Y-%m-%d %H:%M") if last else "-")
    console.print(table)

    if counters.daily_usage:
        daily = Table(title="Last 7 days", show_header=True, header_style="bold magenta")
        daily.add_column("Date")
        daily.add_column("Calls", justify="right")
        for item in counters.daily_usage:
            daily.add_row(str(item["date"]), str(item["calls"]))
        console.print(daily)
