"""Patient type rules engine.

Applies a first-match RuleSet to a contact DataFrame column-wise and
produces a categorical patient type per row.

Decision Flow (per row, all rows at once):
1. Evaluate every rule's predicate against the frame
2. The first rule whose predicate is True claims the row
3. Rows no rule claims stay unlabeled (missing)

The engine also checks rule tables for exhaustiveness: every combination of
the binary indicators crossed with a sweep of each numeric input should be
claimed by some rule.
"""

import logging
from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from ..models import MissingColumnsError, PatientType
from .criteria import DEFAULT_SWEEP_RANGE, PATIENT_TYPE, SWEEP_RANGES
from .schemas import RuleSet

logger = logging.getLogger(__name__)

NO_MATCH = -1

# Offset used to probe either side of a threshold
_THRESHOLD_EPSILON = 1e-6


class PatientTypeRulesEngine:
    """Apply a patient type RuleSet to contact data.

    Example:
        engine = PatientTypeRulesEngine(CLUSTER_RULES)
        df["patient_type"] = engine.classify(df)
    """

    def __init__(self, rule_set: RuleSet):
        self.rule_set = rule_set
        self._categories = PatientType.values()
        self._label_codes = np.array(
            [self._categories.index(rule.label.value) for rule in rule_set.rules],
            dtype=int,
        )

    def _check_fields(self, frame: pd.DataFrame) -> None:
        required = self.rule_set.fields()
        missing = [name for name in required if name not in frame.columns]
        if missing:
            raise MissingColumnsError(required, missing)

    def match_matrix(self, frame: pd.DataFrame) -> np.ndarray:
        """Boolean matrix (rules x rows) of which predicates hold.

        Missing predicate results count as False.
        """
        self._check_fields(frame)
        if not len(self.rule_set):
            return np.zeros((0, len(frame)), dtype=bool)
        return np.vstack([
            rule.predicate.evaluate(frame).fillna(False).to_numpy(dtype=bool)
            for rule in self.rule_set.rules
        ])

    def first_match(self, frame: pd.DataFrame) -> np.ndarray:
        """Index of the rule that claims each row, or NO_MATCH."""
        matches = self.match_matrix(frame)
        winner = np.full(len(frame), NO_MATCH)
        for index, hits in enumerate(matches):
            winner[(winner == NO_MATCH) & hits] = index
        return winner

    def classify(self, frame: pd.DataFrame) -> pd.Series:
        """Label every row of frame.

        Args:
            frame: Contact data containing every column the rule set reads.

        Returns:
            Categorical Series named patient_type, aligned with frame.index,
            with categories Inpatient, Acute Outpatient and Elective
            Outpatient. Unmatched rows are missing.

        Raises:
            MissingColumnsError: If frame lacks an input column.
        """
        winner = self.first_match(frame)
        codes = np.full(len(frame), -1)
        matched = winner != NO_MATCH
        codes[matched] = self._label_codes[winner[matched]]
        labels = pd.Categorical.from_codes(codes, categories=self._categories)
        logger.debug(
            f"Rule set {self.rule_set.name} labeled "
            f"{int((winner != NO_MATCH).sum())} of {len(frame)} rows"
        )
        return pd.Series(labels, index=frame.index, name=PATIENT_TYPE)

    def match_counts(self, frame: pd.DataFrame) -> dict[str, int]:
        """Number of rows each rule claims, keyed by rendered rule."""
        winner = self.first_match(frame)
        counts = {
            str(rule): int((winner == index).sum())
            for index, rule in enumerate(self.rule_set.rules)
        }
        counts["unmatched"] = int((winner == NO_MATCH).sum())
        return counts


# ============================================================================
# Exhaustiveness
# ============================================================================

@dataclass
class ExhaustivenessReport:
    """Result of sweeping a rule set over its input domain."""
    rule_set_name: str
    points_checked: int
    gaps: pd.DataFrame = field(default_factory=pd.DataFrame)      # claimed by no rule
    overlaps: pd.DataFrame = field(default_factory=pd.DataFrame)  # claimed by 2+ rules

    @property
    def is_exhaustive(self) -> bool:
        return self.gaps.empty

    def to_dict(self) -> dict:
        return {
            "rule_set": self.rule_set_name,
            "points_checked": self.points_checked,
            "gaps": len(self.gaps),
            "overlaps": len(self.overlaps),
            "is_exhaustive": self.is_exhaustive,
        }


def _is_binary(rule_set: RuleSet, name: str) -> bool:
    return all(c.is_flag for c in rule_set.comparisons() if c.field == name)


def _sweep(rule_set: RuleSet, name: str) -> np.ndarray:
    start, stop, step = SWEEP_RANGES.get(name, DEFAULT_SWEEP_RANGE)
    values = set(np.round(np.arange(start, stop + step / 2, step), 10))
    for comparison in rule_set.comparisons():
        if comparison.field != name:
            continue
        threshold = float(comparison.value)
        for probe in (threshold - _THRESHOLD_EPSILON, threshold, threshold + _THRESHOLD_EPSILON):
            if probe >= start:
                values.add(probe)
    return np.array(sorted(values))


def build_domain_grid(rule_set: RuleSet) -> pd.DataFrame:
    """Every combination of 0/1 indicators and swept numeric inputs."""
    axes = []
    for name in rule_set.fields():
        axes.append(np.array([0, 1]) if _is_binary(rule_set, name) else _sweep(rule_set, name))
    index = pd.MultiIndex.from_product(axes, names=rule_set.fields())
    return index.to_frame(index=False)


def check_exhaustiveness(rule_set: RuleSet) -> ExhaustivenessReport:
    """Check that rule_set labels every point of its input domain.

    Binary indicators take 0 and 1; numeric inputs are swept over their
    configured range plus every threshold the rules compare against and the
    values just either side of it.

    Returns:
        ExhaustivenessReport with uncovered points (gaps) and points claimed
        by more than one rule (overlaps, resolved by rule order).
    """
    grid = build_domain_grid(rule_set)
    engine = PatientTypeRulesEngine(rule_set)
    hits = engine.match_matrix(grid).sum(axis=0)

    report = ExhaustivenessReport(
        rule_set_name=rule_set.name,
        points_checked=len(grid),
        gaps=grid[hits == 0].reset_index(drop=True),
        overlaps=grid[hits > 1].reset_index(drop=True),
    )
    if not report.is_exhaustive:
        logger.warning(
            f"Rule set {rule_set.name} leaves {len(report.gaps)} of "
            f"{report.points_checked} domain points unlabeled"
        )
    return report
