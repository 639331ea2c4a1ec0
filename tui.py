from typing import List, Optional

from rich.columns import Columns
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from analysis.classifier import Category, TestCase
from analysis.metrics import SuiteMetrics
from grammar.cfg import ContextFreeGrammar
from grammar.generator import Derivation
from grammar.symbols import form_to_text
from modes.suite import SuiteResult

console = Console()

CATEGORY_STYLES = {
    Category.VALID: "green",
    Category.INVALID: "red",
    Category.EXTREME: "yellow",
}


def cases_table(cases: List[TestCase]) -> Table:
    """Create a table of test cases, one row per case."""
    table = Table(title="[bold bright_cyan]TEST CASES", border_style="bright_blue", expand=True)
    table.add_column("ID", style="bright_white", no_wrap=True)
    table.add_column("Category", width=8)
    table.add_column("Content", style="bright_cyan")
    table.add_column("Tokens", justify="right", style="magenta")
    table.add_column("Description", style="bright_black")
    for case in cases:
        style = CATEGORY_STYLES[case.category]
        table.add_row(
            case.id,
            f"[{style}]{case.category.value}[/]",
            escape(case.content),
            str(case.metadata.get("token_count", "")),
            escape(case.description),
        )
    return table


def stats_panel(title: str, entries, color: str = "bright_cyan") -> Panel:
    tbl = Table.grid(expand=True)
    tbl.add_column(justify="right", style="bold bright_white")
    tbl.add_column(justify="left", style=f"bold {color}")
    for k, v in entries:
        tbl.add_row(f"{k}:", f"{v}")
    return Panel(tbl, title=f"[bold {color}]{title}", border_style="bright_blue", expand=True)


def metrics_panel(metrics: SuiteMetrics) -> Panel:
    """Summary panels for category split, sizes and operators."""
    distribution = stats_panel("DISTRIBUTION", [
        ("Total", metrics.total_cases),
        ("Valid", f"{metrics.valid_cases} ({metrics.valid_percentage:.1f}%)"),
        ("Invalid", f"{metrics.invalid_cases} ({metrics.invalid_percentage:.1f}%)"),
        ("Extreme", f"{metrics.extreme_cases} ({metrics.extreme_percentage:.1f}%)"),
    ], color="green")
    sizes = stats_panel("SIZE", [
        ("Avg tokens", f"{metrics.avg_length:.2f}"),
        ("Min / Max", f"{metrics.min_length} / {metrics.max_length}"),
        ("Max depth", metrics.max_depth),
        ("Avg depth", f"{metrics.avg_depth:.2f}"),
    ])
    operators = stats_panel("OPERATORS", [
        *[(op, count) for op, count in metrics.operators_by_type.items()],
        ("Total", metrics.total_operators),
    ], color="magenta")
    timing = stats_panel("TIME", [
        ("Elapsed", f"{metrics.elapsed_ms:.2f} ms"),
        ("Per case", f"{metrics.ms_per_case:.2f} ms"),
    ], color="yellow")
    row = Columns([distribution, sizes, operators, timing], equal=True, expand=True)
    return Panel(row, border_style="bright_blue", title="[bold bright_blue]METRICS")


def derivation_panel(derivation: Derivation, title: Optional[str] = None) -> Panel:
    """Step-by-step trace of one derivation."""
    tbl = Table.grid(padding=(0, 1))
    tbl.add_column(style="bold bright_white", justify="right")
    tbl.add_column(style="bright_cyan")
    tbl.add_column(style="bright_black")
    for i, step in enumerate(derivation.steps):
        applied = f"({step.production})" if step.production is not None else ""
        tbl.add_row(f"{i}", escape(form_to_text(step.form)), escape(applied))
    return Panel(
        tbl,
        title=title or f"[bold bright_blue]Derivation of {escape(repr(derivation.text))}[/]",
        border_style="bright_blue",
        padding=(1, 2)
    )


def grammar_panel(grammar: ContextFreeGrammar) -> Panel:
    tbl = Table.grid(padding=(0, 1))
    tbl.add_column(style="bold bright_white", width=12)
    tbl.add_column(style="bright_cyan")
    tbl.add_row("Start:", grammar.start.value)
    tbl.add_row("Variables:", ", ".join(sorted(v.value for v in grammar.variables)))
    tbl.add_row("Terminals:", escape(", ".join(sorted(t.value for t in grammar.terminals))))
    tbl.add_row("", "")
    for i, production in enumerate(grammar.productions):
        tbl.add_row("Productions:" if i == 0 else "", escape(str(production)))
    return Panel(tbl, title=f"[bold bright_blue]Grammar {grammar.name}[/]", border_style="bright_blue")


def render_grammar(grammar: ContextFreeGrammar, out: Optional[Console] = None):
    (out or console).print(grammar_panel(grammar))


def render_result(result: SuiteResult, out: Optional[Console] = None, show_traces: bool = False):
    """Print the cases and metrics of a run."""
    out = out or console
    parts = []
    if show_traces:
        parts.extend(derivation_panel(d) for d in result.derivations)
    parts.append(cases_table(result.cases))
    parts.append(metrics_panel(result.metrics))
    out.print(Group(*parts))
