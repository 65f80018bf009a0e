"""Data classes for family tree entities."""

import calendar
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class DateResolution(Enum):
    UNKNOWN = "unknown"
    YEAR = "year"
    FULL = "full"


@dataclass(frozen=True)
class PartialDate:
    """
    A date that may be known only to the year, or not at all.

    Construct through `unknown()`, `year_only()` or `full()`; invalid
    combinations (month 13, 30 February, day without month) raise ValueError.
    """

    resolution: DateResolution = DateResolution.UNKNOWN
    year: int | None = None
    month: int | None = None
    day: int | None = None

    def __post_init__(self):
        if self.resolution is DateResolution.UNKNOWN:
            if self.year is not None or self.month is not None or self.day is not None:
                raise ValueError("Unknown date cannot carry year, month or day")
            return

        if self.year is None or not 1 <= self.year <= 9999:
            raise ValueError(f"Year out of range: {self.year}")

        if self.resolution is DateResolution.YEAR:
            if self.month is not None or self.day is not None:
                raise ValueError("Year-only date cannot carry month or day")
            return

        if self.month is None or not 1 <= self.month <= 12:
            raise ValueError(f"Month out of range: {self.month}")
        # monthrange respects leap years
        _, last_day = calendar.monthrange(self.year, self.month)
        if self.day is None or not 1 <= self.day <= last_day:
            raise ValueError(f"Day out of range for {self.month:02d}.{self.year}: {self.day}")

    @classmethod
    def unknown(cls) -> "PartialDate":
        return cls()

    @classmethod
    def year_only(cls, year: int) -> "PartialDate":
        return cls(DateResolution.YEAR, year)

    @classmethod
    def full(cls, year: int, month: int, day: int) -> "PartialDate":
        return cls(DateResolution.FULL, year, month, day)

    @property
    def is_known(self) -> bool:
        return self.resolution is not DateResolution.UNKNOWN

    @property
    def is_full(self) -> bool:
        return self.resolution is DateResolution.FULL

    @property
    def month_day(self) -> tuple[int, int] | None:
        """(month, day) anchor for recurring events, only for full dates."""
        if not self.is_full:
            return None
        return (self.month, self.day)

    def to_date(self) -> date | None:
        """Comparable calendar point; year-only dates map to 1 January."""
        if self.resolution is DateResolution.FULL:
            return date(self.year, self.month, self.day)
        if self.resolution is DateResolution.YEAR:
            return date(self.year, 1, 1)
        return None

    def __str__(self) -> str:
        if self.resolution is DateResolution.FULL:
            return f"{self.day:02d}.{self.month:02d}.{self.year:04d}"
        if self.resolution is DateResolution.YEAR:
            return f"{self.year:04d}"
        return ""


class Sex(Enum):
    MALE = "M"
    FEMALE = "F"


@dataclass(frozen=True)
class Person:
    id: int
    sex: Sex
    first_name: str = ""
    last_name: str = ""
    birth: PartialDate | None = None
    death: PartialDate | None = None
    marriage: PartialDate | None = None
    father_id: int | None = None
    mother_id: int | None = None
    spouse_ids: tuple[int, ...] = ()
    children_ids: tuple[int, ...] = ()
    # Display ordering only, never used for relationship semantics
    order_by_father: int = 0
    order_by_mother: int = 0
    order_by_spouse: int = 0

    @property
    def is_alive(self) -> bool:
        return self.death is None

    @property
    def full_name(self) -> str:
        return f"{self.last_name} {self.first_name}".strip()

    @property
    def parent_ids(self) -> tuple[int, ...]:
        return tuple(pid for pid in (self.father_id, self.mother_id) if pid is not None)


@dataclass(frozen=True)
class ValidationIssue:
    kind: str
    person_id: int
    message: str


@dataclass
class ValidationReport:
    """Soft inconsistencies found (and possibly repaired) during a snapshot build."""

    issues: list[ValidationIssue] = field(default_factory=list)

    def add(self, kind: str, person_id: int, message: str) -> None:
        self.issues.append(ValidationIssue(kind, person_id, message))

    @property
    def counts(self) -> dict[str, int]:
        return dict(Counter(issue.kind for issue in self.issues))

    def for_person(self, person_id: int) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.person_id == person_id]

    def __iter__(self):
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)


@dataclass(frozen=True)
class KinshipResult:
    """
    Outcome of a kinship query.

    Paths run ancestor-ward and include both endpoints. For the self case,
    direct spouses and unrelated people both paths are empty; `generations_*`
    is 0 for self and None when no common ancestor was found. In-law results
    set `via_spouse`, and the path on that side starts at the spouse.
    """

    person_a: int
    person_b: int
    common_ancestor: int | None
    path_a: tuple[int, ...]
    path_b: tuple[int, ...]
    relationship: str
    generations_a: int | None = None
    generations_b: int | None = None
    via_spouse: int | None = None

    @property
    def is_related(self) -> bool:
        return self.relationship != "unrelated"

    @property
    def distance(self) -> int | None:
        if self.generations_a is None or self.generations_b is None:
            return None
        return self.generations_a + self.generations_b


class TreeDirection(Enum):
    DESCENDANTS = "descendants"
    ANCESTORS = "ancestors"


@dataclass(frozen=True)
class TreeNode:
    id: int
    first_name: str
    last_name: str
    sex: Sex
    is_alive: bool
    depth: int
    children: tuple["TreeNode", ...] = ()
    spouse_ids: tuple[int, ...] = ()
    # Set when this id already appears higher up the same branch
    cycle: bool = False

    def walk(self):
        """Yield this node and every node below it, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


class EventKind(Enum):
    BIRTHDAY = "birthday"
    MEMORIAL = "memorial"
    WEDDING_ANNIVERSARY = "wedding"


@dataclass(frozen=True)
class EventProjection:
    person_id: int
    kind: EventKind
    date: date
    years_count: int
    days_until: int
    spouse_id: int | None = None


@dataclass(frozen=True)
class StatsData:
    total_persons: int
    male_count: int
    female_count: int
    alive_count: int
    deceased_count: int
    age_distribution: dict[str, int]
    # (person_id, age) pairs, oldest first
    longest_lived: list[tuple[int, int]]


@dataclass(frozen=True)
class FamilyMember:
    person_id: int
    relation: str
    category: str
