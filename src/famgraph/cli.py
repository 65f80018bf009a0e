"""Command-line interface for querying a family tree file."""

from datetime import date
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from famgraph.config import settings
from famgraph.dates import age, parse_date, zodiac_sign
from famgraph.errors import FamGraphError
from famgraph.events import upcoming_events
from famgraph.family import immediate_family
from famgraph.graph import GraphSnapshot, build_snapshot
from famgraph.ingest import read_records
from famgraph.kinship import kinship as resolve_kinship
from famgraph.models import TreeDirection, TreeNode, ValidationReport
from famgraph.stats import compute_stats
from famgraph.tree import build_subtree

app = typer.Typer(
    name="famgraph",
    help="Kinship, trees, events and statistics over a family tree file",
    add_completion=False,
)
console = Console()


def _load(path: Path) -> tuple[GraphSnapshot, ValidationReport]:
    try:
        return build_snapshot(read_records(path))
    except FamGraphError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e


def _name(snapshot: GraphSnapshot, person_id: int | None) -> str:
    person = snapshot.get(person_id) if person_id is not None else None
    if person is None:
        return "-"
    return f"{person.full_name or '?'} (#{person.id})"


def _parse_today(value: str | None) -> date:
    if value is None:
        return date.today()
    parsed = parse_date(value)
    if not parsed.is_full:
        raise typer.BadParameter("expected DD.MM.YYYY")
    return parsed.to_date()


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def validate(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or GEDCOM file"),
    limit: int = typer.Option(10, help="Issues to list"),
):
    """Build the snapshot and report data issues."""
    snapshot, report = _load(path)
    console.print(f"{len(snapshot)} persons, {len(report)} validation issues")

    if report.counts:
        table = Table(title="Issues by kind")
        table.add_column("Kind")
        table.add_column("Count", justify="right")
        for kind, count in sorted(report.counts.items()):
            table.add_row(kind, str(count))
        console.print(table)

    for issue in report.issues[:limit]:
        console.print(
            escape(f"  - [{issue.kind}] {_name(snapshot, issue.person_id)}: {issue.message}")
        )
    if len(report) > limit:
        console.print(f"  ... and {len(report) - limit} more")


@app.command()
def person(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or GEDCOM file"),
    person_id: int = typer.Argument(...),
):
    """Show one person with their immediate family."""
    snapshot, _ = _load(path)
    try:
        subject = snapshot.person(person_id)
        family = immediate_family(snapshot, person_id)
    except FamGraphError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    reference = subject.death if subject.death else date.today()
    years = age(subject.birth, reference)
    sign = zodiac_sign(subject.birth)

    console.print(f"[bold]{_name(snapshot, subject.id)}[/bold]")
    console.print(f"Born: {subject.birth or '-'}  Died: {subject.death or '-'}")
    console.print(f"Age: {years if years is not None else '-'}  Zodiac: {sign.value if sign else '-'}")

    table = Table(title="Family")
    table.add_column("Relation")
    table.add_column("Person")
    for member in family[1:]:
        table.add_row(member.relation, _name(snapshot, member.person_id))
    console.print(table)


@app.command()
def kinship(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or GEDCOM file"),
    person_a: int = typer.Argument(...),
    person_b: int = typer.Argument(...),
    max_depth: int = typer.Option(None, help="Generations to search"),
):
    """Explain how two people are related."""
    snapshot, _ = _load(path)
    try:
        result = resolve_kinship(snapshot, person_a, person_b, max_depth)
    except FamGraphError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    console.print(
        f"{_name(snapshot, person_a)} is [bold]{result.relationship}[/bold] "
        f"to {_name(snapshot, person_b)}"
    )
    if result.via_spouse is not None:
        console.print(f"Through spouse: {_name(snapshot, result.via_spouse)}")
    if result.common_ancestor is not None:
        console.print(f"Common ancestor: {_name(snapshot, result.common_ancestor)}")
        for path_ids in (result.path_a, result.path_b):
            console.print("  " + " -> ".join(_name(snapshot, pid) for pid in path_ids))


def _add_branch(branch: Tree, node: TreeNode) -> None:
    label = escape(f"{node.first_name} {node.last_name} (#{node.id})".strip())
    if not node.is_alive:
        label += " +"
    if node.cycle:
        label += " [red](cycle)[/red]"
    sub = branch.add(label)
    for child in node.children:
        _add_branch(sub, child)


@app.command()
def tree(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or GEDCOM file"),
    root_id: int = typer.Argument(...),
    direction: TreeDirection = typer.Option(TreeDirection.DESCENDANTS, help="Tree direction"),
    depth: int = typer.Option(None, help="Generations to expand"),
):
    """Print a descendant or ancestor tree."""
    snapshot, _ = _load(path)
    try:
        root = build_subtree(snapshot, root_id, direction, depth)
    except FamGraphError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    display = Tree(f"[bold]{direction.value}[/bold]")
    _add_branch(display, root)
    console.print(display)


@app.command()
def events(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or GEDCOM file"),
    days: int = typer.Option(settings.event_window_days, help="Window in days"),
    today: str = typer.Option(None, help="Reference date, DD.MM.YYYY"),
):
    """List birthdays, memorial days and wedding anniversaries coming up."""
    snapshot, _ = _load(path)
    projections = upcoming_events(snapshot, days, _parse_today(today), include_age=True)

    table = Table(title=f"Events in the next {days} days")
    table.add_column("Date")
    table.add_column("In days", justify="right")
    table.add_column("Event")
    table.add_column("Person")
    table.add_column("Years", justify="right")
    for event in projections:
        table.add_row(
            event.date.strftime("%d.%m.%Y"),
            str(event.days_until),
            event.kind.value,
            _name(snapshot, event.person_id),
            str(event.years_count),
        )
    console.print(table)


@app.command()
def stats(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV or GEDCOM file"),
    today: str = typer.Option(None, help="Reference date, DD.MM.YYYY"),
):
    """Population statistics."""
    snapshot, _ = _load(path)
    data = compute_stats(snapshot, _parse_today(today))

    console.print(
        f"Total: {data.total_persons}  Male: {data.male_count}  Female: {data.female_count}  "
        f"Alive: {data.alive_count}  Deceased: {data.deceased_count}"
    )

    table = Table(title="Age distribution")
    table.add_column("Age")
    table.add_column("Persons", justify="right")
    for bucket, count in data.age_distribution.items():
        table.add_row(bucket, str(count))
    console.print(table)

    if data.longest_lived:
        console.print("Longest lived:")
        for person_id, years in data.longest_lived:
            console.print(f"  {years}  {_name(snapshot, person_id)}")


if __name__ == "__main__":
    app()
