"""Bounded descendant and ancestor subtrees."""

from operator import attrgetter

from famgraph.config import settings
from famgraph.graph import GraphSnapshot
from famgraph.models import Person, Sex, TreeDirection, TreeNode


def _children_in_order(snapshot: GraphSnapshot, parent: Person) -> list[Person]:
    """Children sorted by the parent's side of the display ordering, ties by id."""
    if parent.sex is Sex.MALE:
        key = attrgetter("order_by_father", "id")
    else:
        key = attrgetter("order_by_mother", "id")
    return sorted(snapshot.children(parent.id), key=key)


def _build_node(
    snapshot: GraphSnapshot,
    person: Person,
    direction: TreeDirection,
    depth: int,
    max_depth: int,
    branch: frozenset[int],
) -> TreeNode:
    # Already on the path from the root: corrupt data loops back here
    if person.id in branch:
        return TreeNode(
            id=person.id,
            first_name=person.first_name,
            last_name=person.last_name,
            sex=person.sex,
            is_alive=person.is_alive,
            depth=depth,
            cycle=True,
        )

    branch = branch | {person.id}
    children: tuple[TreeNode, ...] = ()
    spouse_ids: tuple[int, ...] = ()

    if direction is TreeDirection.DESCENDANTS:
        spouses = sorted(snapshot.spouses(person.id), key=lambda s: (s.order_by_spouse, s.id))
        spouse_ids = tuple(s.id for s in spouses)
        next_generation = _children_in_order(snapshot, person)
    else:
        # Father first, then mother
        next_generation = snapshot.parents(person.id)

    if depth < max_depth:
        children = tuple(
            _build_node(snapshot, relative, direction, depth + 1, max_depth, branch)
            for relative in next_generation
        )

    return TreeNode(
        id=person.id,
        first_name=person.first_name,
        last_name=person.last_name,
        sex=person.sex,
        is_alive=person.is_alive,
        depth=depth,
        children=children,
        spouse_ids=spouse_ids,
    )


def build_subtree(
    snapshot: GraphSnapshot,
    root_id: int,
    direction: TreeDirection | str = TreeDirection.DESCENDANTS,
    max_depth: int | None = None,
) -> TreeNode:
    """
    Materialize the descendant or ancestor tree below `root_id`.

    Args:
        snapshot: The snapshot to read from
        root_id: The person at the root of the tree
        direction: Follow child edges (descendants) or parent edges (ancestors)
        max_depth: Generations to expand; 0 returns the root alone. Defaults
            to settings.tree_max_depth

    Returns:
        The root TreeNode. Ancestors reached through several lines (pedigree
        collapse) appear once per line; an id that repeats within one
        root-to-leaf branch is returned as a childless node with `cycle` set.

    Raises:
        PersonNotFoundError: if root_id is not in the snapshot
    """
    if max_depth is None:
        max_depth = settings.tree_max_depth

    root = snapshot.person(root_id)
    return _build_node(snapshot, root, TreeDirection(direction), 0, max(max_depth, 0), frozenset())
