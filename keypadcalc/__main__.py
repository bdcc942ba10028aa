"""Terminal front end for the keypadcalc engine.

Usage:
    python -m keypadcalc keys                   # Show the keypad
    python -m keypadcalc press 2 + 3 + 4 =      # Press buttons, print display
    python -m keypadcalc press 9 sqrt --trace   # Show the display after each press
"""

from __future__ import annotations

from typing import List

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from keypadcalc.engine import format_number
from keypadcalc.keypad import LAYOUT, Keypad, UnknownKeyError, operator_glyph
from keypadcalc.models import ERROR_MARKER

app = typer.Typer(
    name="keypadcalc",
    help="Keypad calculator driven by button presses",
    no_args_is_help=True,
)
console = Console(stderr=True)


@app.command("keys")
def cmd_keys() -> None:
    """Show the keypad layout."""
    width = max(len(row) for row in LAYOUT)
    table = Table(title="Keypad", show_header=False, show_lines=True)
    for _ in range(width):
        table.add_column(justify="center", min_width=5)

    for row in LAYOUT:
        table.add_row(*(row + [""] * (width - len(row))))

    console.print()
    console.print(table)
    console.print("[dim]ASCII aliases: - * / +/- C sqrt sq cbrt inv[/dim]")
    console.print()


@app.command("press")
def cmd_press(
    labels: List[str] = typer.Argument(help="Button labels, pressed in order (e.g., 2 + 3 =)"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show the display after every press"),
) -> None:
    """Press buttons in order and print the final display."""
    keypad = Keypad()

    table = Table(title="Presses", show_header=True, header_style="bold")
    table.add_column("Key", style="cyan", justify="center")
    table.add_column("Display", justify="right", min_width=12)
    table.add_column("Pending", justify="center")

    for label in labels:
        try:
            text = keypad.press(label)
        except UnknownKeyError as e:
            console.print(f"[red]{e}[/red]. Run 'keypadcalc keys' to see the keypad.")
            raise typer.Exit(1)
        state = keypad.engine.state
        shown = f"[red]{text}[/red]" if text == ERROR_MARKER else text
        pending = f"{format_number(state.previous_value)} {operator_glyph(state.pending_operator)}" if state.pending_operator else "[dim]--[/dim]"
        table.add_row(label, shown, pending)

    if trace:
        console.print()
        console.print(table)

    style = "red" if keypad.display == ERROR_MARKER else "bold green"
    console.print(Panel(f"[{style}]{keypad.display}[/{style}]", expand=False))
    # Plain result on stdout for scripting
    typer.echo(keypad.display)


if __name__ == "__main__":
    app()
