"""Exceptions raised by the genealogy engine."""


class FamGraphError(Exception):
    """Base class for engine errors."""


class DuplicateIdError(FamGraphError, ValueError):
    """Raised when a record batch contains the same person id more than once.

    The snapshot build is aborted; callers must keep the previous snapshot.
    """

    def __init__(self, ids: list[int]):
        self.ids = sorted(set(ids))
        super().__init__(f"Duplicate person IDs in records: {self.ids}")


class PersonNotFoundError(FamGraphError, ValueError):
    """Raised when a query references an id absent from the snapshot."""

    def __init__(self, person_id: int):
        self.person_id = person_id
        super().__init__(f"Person ID {person_id} not found in graph")
