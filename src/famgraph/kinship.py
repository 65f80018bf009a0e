"""Common ancestor resolution and relationship labelling."""

import logging

from famgraph.config import settings
from famgraph.graph import GraphSnapshot
from famgraph.models import KinshipResult

logger = logging.getLogger(__name__)

SELF = "self"
SPOUSE = "spouse"
UNRELATED = "unrelated"

ORDINALS = {
    1: "first",
    2: "second",
    3: "third",
    4: "fourth",
    5: "fifth",
    6: "sixth",
    7: "seventh",
    8: "eighth",
    9: "ninth",
    10: "tenth",
}


def _ordinal(n: int) -> str:
    return ORDINALS.get(n, f"{n}th")


def _times(n: int) -> str:
    if n == 1:
        return "once"
    if n == 2:
        return "twice"
    return f"{n} times"


def describe_relationship(generations_a: int, generations_b: int) -> str:
    """
    Label person A relative to person B.

    Arguments are each person's distance (in generations) to their nearest
    common ancestor. Labels are sex-neutral:

        (0, 0)  self
        (0, 1)  parent / child (A is the parent when A's distance is 0)
        (1, 1)  siblings
        (0, 2)  grandparent / grandchild; further up adds "great-"
        (1, 2)  aunt/uncle / nephew/niece; (1, n >= 3) adds "great-"
        (n, m)  both >= 2: cousins of degree min - 1, removed |n - m| times
    """
    if generations_a == 0 and generations_b == 0:
        return SELF

    near, far = sorted((generations_a, generations_b))
    a_is_elder = generations_a < generations_b

    if near == 0:
        if far == 1:
            return "parent" if a_is_elder else "child"
        greats = "great-" * (far - 2)
        return greats + ("grandparent" if a_is_elder else "grandchild")

    if near == 1:
        if far == 1:
            return "siblings"
        greats = "great-" * (far - 2)
        return greats + ("aunt/uncle" if a_is_elder else "nephew/niece")

    label = f"{_ordinal(near - 1)} cousins"
    removed = far - near
    if removed:
        label += f" {_times(removed)} removed"
    return label


def _blood_kinship(
    snapshot: GraphSnapshot, id_a: int, id_b: int, max_depth: int
) -> KinshipResult | None:
    """Nearest common ancestor by breadth-first search up both pedigrees."""
    paths_a = snapshot.ancestor_paths(id_a, max_depth)
    paths_b = snapshot.ancestor_paths(id_b, max_depth)

    common = paths_a.keys() & paths_b.keys()
    if not common:
        return None

    def rank(ancestor_id: int) -> tuple[int, int, int]:
        gen_a = len(paths_a[ancestor_id]) - 1
        gen_b = len(paths_b[ancestor_id]) - 1
        # Shortest combined path, then the most balanced one, then lowest id
        return (gen_a + gen_b, max(gen_a, gen_b), ancestor_id)

    ancestor_id = min(common, key=rank)
    path_a = tuple(paths_a[ancestor_id])
    path_b = tuple(paths_b[ancestor_id])
    gen_a, gen_b = len(path_a) - 1, len(path_b) - 1

    return KinshipResult(
        person_a=id_a,
        person_b=id_b,
        common_ancestor=ancestor_id,
        path_a=path_a,
        path_b=path_b,
        relationship=describe_relationship(gen_a, gen_b),
        generations_a=gen_a,
        generations_b=gen_b,
    )


def _in_law_kinship(
    snapshot: GraphSnapshot, id_a: int, id_b: int, max_depth: int
) -> KinshipResult | None:
    """
    Relation through one marriage: a spouse of either person who is a blood
    relative of the other.
    """
    person_a = snapshot.person(id_a)
    person_b = snapshot.person(id_b)

    if id_b in person_a.spouse_ids:
        return KinshipResult(id_a, id_b, None, (), (), SPOUSE, via_spouse=id_b)

    candidates: list[tuple[KinshipResult, int, bool]] = []
    for spouse_id in person_a.spouse_ids:
        found = _blood_kinship(snapshot, spouse_id, id_b, max_depth)
        if found is not None:
            candidates.append((found, spouse_id, True))
    for spouse_id in person_b.spouse_ids:
        found = _blood_kinship(snapshot, id_a, spouse_id, max_depth)
        if found is not None:
            candidates.append((found, spouse_id, False))

    if not candidates:
        return None

    found, spouse_id, through_a = min(
        candidates,
        key=lambda c: (c[0].distance, max(c[0].generations_a, c[0].generations_b), c[1]),
    )

    # Married to a direct ancestor of the other person: step relation, not in-law
    if (through_a and found.generations_a == 0) or (not through_a and found.generations_b == 0):
        label = f"step-{found.relationship}"
    else:
        label = f"{found.relationship}-in-law"

    return KinshipResult(
        person_a=id_a,
        person_b=id_b,
        common_ancestor=found.common_ancestor,
        path_a=found.path_a,
        path_b=found.path_b,
        relationship=label,
        generations_a=found.generations_a,
        generations_b=found.generations_b,
        via_spouse=spouse_id,
    )


def kinship(
    snapshot: GraphSnapshot, id_a: int, id_b: int, max_depth: int | None = None
) -> KinshipResult:
    """
    Determine how two people are related.

    Searches at most `max_depth` generations up each pedigree (default from
    settings). Blood relations win; only when none is found is the in-law
    pass run. Unrelated pairs get the label "unrelated" and empty paths.

    Raises:
        PersonNotFoundError: if either id is not in the snapshot
    """
    if max_depth is None:
        max_depth = settings.kinship_max_depth

    snapshot.person(id_a)
    snapshot.person(id_b)

    if id_a == id_b:
        return KinshipResult(id_a, id_b, None, (), (), SELF, generations_a=0, generations_b=0)

    result = _blood_kinship(snapshot, id_a, id_b, max_depth)
    if result is None:
        result = _in_law_kinship(snapshot, id_a, id_b, max_depth)
    if result is None:
        result = KinshipResult(id_a, id_b, None, (), (), UNRELATED)

    logger.debug("Kinship %s -> %s: %s", id_a, id_b, result.relationship)
    return result
