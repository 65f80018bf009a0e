"""Immediate family of a person: parents, spouses, siblings and three generations down."""

from famgraph.graph import GraphSnapshot
from famgraph.models import FamilyMember, Person, Sex

# category -> (word for a male, word for a female)
RELATION_WORDS = {
    "parents": ("father", "mother"),
    "spouses": ("husband", "wife"),
    "siblings": ("brother", "sister"),
    "children": ("son", "daughter"),
    "grandchildren": ("grandson", "granddaughter"),
    "greatGrandchildren": ("great-grandson", "great-granddaughter"),
}


def _member(person: Person, category: str) -> FamilyMember:
    male, female = RELATION_WORDS[category]
    return FamilyMember(person.id, male if person.sex is Sex.MALE else female, category)


def immediate_family(snapshot: GraphSnapshot, person_id: int) -> list[FamilyMember]:
    """
    List the person's close family, grouped by category in a fixed order.

    Siblings include half-siblings through either parent. Each relative
    appears once per category.
    """
    person = snapshot.person(person_id)
    members = [FamilyMember(person.id, "self", "self")]

    members.extend(_member(parent, "parents") for parent in snapshot.parents(person_id))
    members.extend(_member(spouse, "spouses") for spouse in snapshot.spouses(person_id))

    sibling_ids: dict[int, None] = {}
    for parent in snapshot.parents(person_id):
        for child_id in parent.children_ids:
            if child_id != person_id:
                sibling_ids[child_id] = None
    members.extend(_member(snapshot.persons[sid], "siblings") for sid in sibling_ids)

    generation = [person]
    for category in ("children", "grandchildren", "greatGrandchildren"):
        below: dict[int, Person] = {}
        for relative in generation:
            for child in snapshot.children(relative.id):
                below.setdefault(child.id, child)
        members.extend(_member(child, category) for child in below.values())
        generation = list(below.values())

    return members
