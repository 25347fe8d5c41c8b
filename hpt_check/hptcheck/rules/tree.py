"""Rule tree nodes and the work-list evaluator."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Union

from hptcheck.diagnostics.models import Diagnostic
from hptcheck.schema.versions import version_applies

Record = Mapping[str, str]
Validator = Callable[[Record, int], list[Diagnostic]]
Predicate = Callable[[Record], bool]


@dataclass(frozen=True)
class Leaf:
    """A rule that always runs its validator."""

    name: str
    validator: Validator
    applies: str = ">=2.0.0"


@dataclass(frozen=True)
class Branch:
    """A rule that picks a validator and child list from its predicate."""

    name: str
    predicate: Predicate
    validator: Validator | None = None
    negative_validator: Validator | None = None
    children: tuple[RuleNode, ...] = field(default_factory=tuple)
    negative_children: tuple[RuleNode, ...] = field(default_factory=tuple)
    applies: str = ">=2.0.0"


RuleNode = Union[Leaf, Branch]


def filter_on_version(nodes: Sequence[RuleNode], version: str) -> list[RuleNode]:
    """Return a copy of the tree holding only the nodes that apply to *version*."""
    kept: list[RuleNode] = []
    for node in nodes:
        if not version_applies(version, node.applies):
            continue
        if isinstance(node, Branch):
            node = replace(
                node,
                children=tuple(filter_on_version(node.children, version)),
                negative_children=tuple(filter_on_version(node.negative_children, version)),
            )
        kept.append(node)
    return kept


def evaluate(nodes: Sequence[RuleNode], record: Record, row: int) -> list[Diagnostic]:
    """Run every applicable rule against one record.

    Children selected by a branch are pushed to the front of the work list,
    in declaration order, so they run before the branch's later siblings.
    """
    findings: list[Diagnostic] = []
    pending: deque[RuleNode] = deque(nodes)
    while pending:
        node = pending.popleft()
        if isinstance(node, Leaf):
            findings.extend(node.validator(record, row))
            continue

        if node.predicate(record):
            validator, children = node.validator, node.children
        else:
            validator, children = node.negative_validator, node.negative_children
        if validator is not None:
            findings.extend(validator(record, row))
        pending.extendleft(reversed(children))
    return findings
