"""Graph validation for family tree data."""

import logging
from typing import TYPE_CHECKING

import networkx as nx

from famgraph.config import settings
from famgraph.dates import age
from famgraph.models import PartialDate, ValidationIssue

if TYPE_CHECKING:
    from famgraph.graph import GraphSnapshot

logger = logging.getLogger(__name__)


def _precedes(earlier: PartialDate, later: PartialDate) -> bool:
    """True when `later` is strictly before `earlier` at the resolution both share."""
    if earlier.is_full and later.is_full:
        return later.to_date() < earlier.to_date()
    return later.year < earlier.year


def validate_snapshot(
    snapshot: "GraphSnapshot", min_parent_age: int | None = None
) -> list[ValidationIssue]:
    """
    Validate the family tree snapshot for:
    - Cycles in parent-child relationships
    - Impossible ages (child born before parent, very young parents)
    - Death recorded before birth
    - Empty or placeholder names and people with no links at all

    Returns a list of issues; nothing here is fatal.
    """
    if min_parent_age is None:
        min_parent_age = settings.min_parent_age

    issues: list[ValidationIssue] = []

    # Check for cycles: every strongly connected group of size > 1 is one
    for component in nx.strongly_connected_components(snapshot.lineage):
        if len(component) > 1:
            members = sorted(component)
            logger.warning("Parent cycle among persons %s", members)
            issues.append(
                ValidationIssue(
                    "parent_cycle",
                    members[0],
                    f"Cycle detected in parent-child relationships: {members}",
                )
            )

    # Check for impossible ages (child born before parent)
    for parent_id, child_id in snapshot.lineage.edges():
        parent = snapshot.persons[parent_id]
        child = snapshot.persons[child_id]

        if not (parent.birth and parent.birth.is_known and child.birth and child.birth.is_known):
            continue

        if _precedes(parent.birth, child.birth):
            issues.append(
                ValidationIssue(
                    "child_born_before_parent",
                    child_id,
                    f"Impossible: {child.full_name} born before parent {parent.full_name}",
                )
            )
        else:
            parent_age = age(parent.birth, child.birth)
            if parent_age is not None and parent_age < min_parent_age:
                issues.append(
                    ValidationIssue(
                        "parent_too_young",
                        parent_id,
                        f"Suspicious: {parent.full_name} was less than {min_parent_age} years "
                        f"old when {child.full_name} was born",
                    )
                )

    for person in snapshot:
        # Check death before birth
        birth, death = person.birth, person.death
        if birth and death and birth.is_known and death.is_known and _precedes(birth, death):
            issues.append(
                ValidationIssue(
                    "death_before_birth",
                    person.id,
                    f"Impossible: {person.full_name} died ({death}) before being born ({birth})",
                )
            )

        if not person.first_name and not person.last_name:
            issues.append(ValidationIssue("empty_name", person.id, "Empty first and last name"))
        elif "?" in person.first_name or "?" in person.last_name:
            issues.append(ValidationIssue("unknown_person", person.id, "Name contains '?'"))

        if not person.parent_ids and not person.spouse_ids and not person.children_ids:
            issues.append(ValidationIssue("isolated", person.id, "No links to anyone"))

    return issues
