"""Schemas for the patient type rules engine.

This module defines:
- Predicate nodes (Compare, And, Or, Not): a small boolean expression tree
  over named DataFrame columns
- Field/Flag: builders that turn Python comparison and bitwise operators
  into predicate nodes
- Rule and RuleSet: ordered (predicate, label) tables evaluated first-match

Predicates evaluate column-wise with three-valued (Kleene) logic: a missing
input makes a comparison missing, and a missing result only becomes True or
False if the other operand of an AND/OR decides it. The engine treats a
missing final result as "no match".
"""

import operator
from abc import ABC, abstractmethod
from dataclasses import dataclass

import pandas as pd

from ..models import PatientType

_OPERATORS = {
    "==": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


class Predicate(ABC):
    """A boolean expression over the columns of a contact DataFrame."""

    @abstractmethod
    def evaluate(self, frame: pd.DataFrame) -> pd.Series:
        """Evaluate against every row.

        Returns:
            Series of pandas "boolean" dtype aligned with frame.index,
            missing where the inputs do not decide the outcome.
        """

    @abstractmethod
    def fields(self) -> set[str]:
        """Column names the predicate reads."""

    @abstractmethod
    def comparisons(self) -> list["Compare"]:
        """All leaf comparisons, left to right."""

    def __and__(self, other: "Predicate") -> "And":
        return And(_flatten(And, self) + _flatten(And, other))

    def __or__(self, other: "Predicate") -> "Or":
        return Or(_flatten(Or, self) + _flatten(Or, other))

    def __invert__(self) -> "Not":
        return Not(self)


def _flatten(node_type, predicate: Predicate) -> tuple:
    if isinstance(predicate, node_type):
        return predicate.operands
    return (predicate,)


@dataclass(frozen=True)
class Compare(Predicate):
    """Compare a numeric column with a constant."""
    field: str
    op: str
    value: float

    def __post_init__(self):
        if self.op not in _OPERATORS:
            raise ValueError(f"Unsupported comparison operator: {self.op}")

    def evaluate(self, frame: pd.DataFrame) -> pd.Series:
        column = pd.to_numeric(frame[self.field], errors="coerce").astype("Float64")
        return _OPERATORS[self.op](column, self.value)

    def fields(self) -> set[str]:
        return {self.field}

    def comparisons(self) -> list["Compare"]:
        return [self]

    @property
    def is_flag(self) -> bool:
        """True for 0/1 indicator tests (column == 1)."""
        return self.op == "==" and self.value == 1

    def __str__(self) -> str:
        if self.is_flag:
            return self.field
        return f"{self.field} {self.op} {self.value:g}"


@dataclass(frozen=True)
class And(Predicate):
    operands: tuple

    def evaluate(self, frame: pd.DataFrame) -> pd.Series:
        result = self.operands[0].evaluate(frame)
        for operand in self.operands[1:]:
            result = result & operand.evaluate(frame)
        return result

    def fields(self) -> set[str]:
        return set().union(*(operand.fields() for operand in self.operands))

    def comparisons(self) -> list[Compare]:
        return [c for operand in self.operands for c in operand.comparisons()]

    def __str__(self) -> str:
        return " AND ".join(_wrap(operand) for operand in self.operands)


@dataclass(frozen=True)
class Or(Predicate):
    operands: tuple

    def evaluate(self, frame: pd.DataFrame) -> pd.Series:
        result = self.operands[0].evaluate(frame)
        for operand in self.operands[1:]:
            result = result | operand.evaluate(frame)
        return result

    def fields(self) -> set[str]:
        return set().union(*(operand.fields() for operand in self.operands))

    def comparisons(self) -> list[Compare]:
        return [c for operand in self.operands for c in operand.comparisons()]

    def __str__(self) -> str:
        return " OR ".join(_wrap(operand) for operand in self.operands)


@dataclass(frozen=True)
class Not(Predicate):
    operand: Predicate

    def evaluate(self, frame: pd.DataFrame) -> pd.Series:
        return ~self.operand.evaluate(frame)

    def fields(self) -> set[str]:
        return self.operand.fields()

    def comparisons(self) -> list[Compare]:
        return self.operand.comparisons()

    def __str__(self) -> str:
        return f"not {_wrap(self.operand)}"


def _wrap(predicate: Predicate) -> str:
    if isinstance(predicate, (And, Or)):
        return f"({predicate})"
    return str(predicate)


class Field:
    """Column reference that builds Compare nodes from comparison operators.

    Example:
        Field("duration_h") >= 9   # Compare("duration_h", ">=", 9)
    """

    def __init__(self, name: str):
        self.name = name

    def __eq__(self, value) -> Compare:  # type: ignore[override]
        return Compare(self.name, "==", value)

    def __ne__(self, value) -> Compare:  # type: ignore[override]
        return Compare(self.name, "!=", value)

    def __lt__(self, value) -> Compare:
        return Compare(self.name, "<", value)

    def __le__(self, value) -> Compare:
        return Compare(self.name, "<=", value)

    def __gt__(self, value) -> Compare:
        return Compare(self.name, ">", value)

    def __ge__(self, value) -> Compare:
        return Compare(self.name, ">=", value)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Field({self.name!r})"


def Flag(name: str) -> Compare:
    """0/1 indicator column that is set (== 1). Negate with ~ for "not set"."""
    return Field(name) == 1


# ============================================================================
# Rule tables
# ============================================================================

@dataclass(frozen=True)
class Rule:
    """One row of a rule table: rows matching predicate get label."""
    predicate: Predicate
    label: PatientType

    def __str__(self) -> str:
        return f"{self.predicate} -> {self.label.value}"


@dataclass(frozen=True)
class RuleSet:
    """Ordered first-match rule table.

    Rules are evaluated top to bottom; the first rule whose predicate is
    True decides the row's label. Rows matching no rule are left unlabeled.
    """
    name: str
    rules: tuple[Rule, ...]

    def fields(self) -> list[str]:
        """Input columns read by any rule, sorted."""
        return sorted(set().union(*(rule.predicate.fields() for rule in self.rules)))

    def labels(self) -> list[PatientType]:
        """Distinct labels in rule order."""
        seen = []
        for rule in self.rules:
            if rule.label not in seen:
                seen.append(rule.label)
        return seen

    def comparisons(self) -> list[Compare]:
        return [c for rule in self.rules for c in rule.predicate.comparisons()]

    def __len__(self) -> int:
        return len(self.rules)

    def __str__(self) -> str:
        lines = [f"RuleSet {self.name}:"]
        lines.extend(f"  {i}. {rule}" for i, rule in enumerate(self.rules, start=1))
        return "\n".join(lines)
