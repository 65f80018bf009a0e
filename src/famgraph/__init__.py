"""Genealogy graph engine: kinship, subtrees, recurring events and population statistics."""

from famgraph.dates import age, next_occurrence, parse_date, zodiac_sign
from famgraph.errors import DuplicateIdError, FamGraphError, PersonNotFoundError
from famgraph.events import upcoming_events
from famgraph.family import immediate_family
from famgraph.graph import GraphSnapshot, build_snapshot
from famgraph.kinship import describe_relationship, kinship
from famgraph.models import (
    DateResolution,
    EventKind,
    EventProjection,
    FamilyMember,
    KinshipResult,
    PartialDate,
    Person,
    Sex,
    StatsData,
    TreeDirection,
    TreeNode,
    ValidationIssue,
    ValidationReport,
)
from famgraph.stats import compute_stats
from famgraph.store import SnapshotStore
from famgraph.tree import build_subtree

__all__ = [
    "DateResolution",
    "DuplicateIdError",
    "EventKind",
    "EventProjection",
    "FamGraphError",
    "FamilyMember",
    "GraphSnapshot",
    "KinshipResult",
    "PartialDate",
    "Person",
    "PersonNotFoundError",
    "Sex",
    "SnapshotStore",
    "StatsData",
    "TreeDirection",
    "TreeNode",
    "ValidationIssue",
    "ValidationReport",
    "age",
    "build_snapshot",
    "build_subtree",
    "compute_stats",
    "describe_relationship",
    "immediate_family",
    "kinship",
    "next_occurrence",
    "parse_date",
    "upcoming_events",
    "zodiac_sign",
]
