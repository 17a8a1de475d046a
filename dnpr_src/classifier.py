"""Patient type classification of DNPR3 contacts.

Learns patient type (Inpatient / Acute Outpatient / Elective Outpatient)
from contact details.

The input needs, for the cluster and hybrid algorithms:
- duration_h, or all of dato_start, tidspunkt_start, dato_slut, tidspunkt_slut
- elective, or prioritet as defined in DNPR3
- overnight, or dato_start and dato_slut

For the hybrid_dep algorithm:
- p_overnight (or a department column to aggregate it from)
- elective, or prioritet

Missing indicator variables are derived in that order (duration, elective,
overnight, over24h); variables already present are never recomputed.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from .config import Config
from .data.department import add_department_overnight_share
from .data.duration import add_duration
from .data.indicators import derive_elective, derive_over24h, derive_overnight
from .data.sources import ContactSource, load_source, write_output
from .models import (
    ClassificationMethod,
    DurationUnit,
    MissingColumnsError,
    OutputFormat,
    PatientType,
    coerce_enum,
)
from .rules.criteria import (
    DATE_END,
    DATE_START,
    DURATION_H,
    ELECTIVE,
    OVER24H,
    OVERNIGHT,
    P_OVERNIGHT,
    PATIENT_TYPE,
    PRIORITY,
    TIMESTAMP_COLUMNS,
)
from .rules.engine import PatientTypeRulesEngine
from .rules.rule_sets import get_rule_set

logger = logging.getLogger(__name__)


@dataclass
class ClassificationSummary:
    """Counts of assigned patient types for one classified table."""
    method: str
    total: int
    by_label: dict[str, int] = field(default_factory=dict)
    unlabeled_missing_inputs: int = 0   # no label because a rule input was missing
    unlabeled_complete_inputs: int = 0  # no label although all inputs were present

    @property
    def unlabeled(self) -> int:
        return self.unlabeled_missing_inputs + self.unlabeled_complete_inputs

    def to_dict(self) -> dict:
        return {
            "method": self.method,
            "total": self.total,
            "by_label": self.by_label,
            "unlabeled": self.unlabeled,
            "unlabeled_missing_inputs": self.unlabeled_missing_inputs,
            "unlabeled_complete_inputs": self.unlabeled_complete_inputs,
        }


class PatientTypeClassifier:
    """Derive indicator variables and apply a patient type algorithm.

    Example:
        classifier = PatientTypeClassifier("hybrid")
        labeled = classifier.classify(contacts)
    """

    def __init__(
        self,
        method: ClassificationMethod | str | None = None,
        department: str | None = None,
    ):
        """Initialize the classifier.

        Args:
            method: cluster, hybrid or hybrid_dep. Defaults to
                Config.DEFAULT_METHOD.
            department: For hybrid_dep, the organizational unit column used
                to aggregate p_overnight when the input lacks it.
        """
        self.method = coerce_enum(ClassificationMethod, method or Config.DEFAULT_METHOD)
        self.department = department
        self.rule_set = get_rule_set(self.method)
        self.engine = PatientTypeRulesEngine(self.rule_set)

    def validate(self, columns) -> None:
        """Check that columns suffice for this method.

        Raises:
            MissingColumnsError: Naming the variables the input must contain.
        """
        columns = set(columns)

        if self.method is ClassificationMethod.HYBRID_DEP:
            if P_OVERNIGHT not in columns:
                if not self.department:
                    raise MissingColumnsError([P_OVERNIGHT], [P_OVERNIGHT])
                if self.department not in columns:
                    raise MissingColumnsError(
                        [self.department], [self.department], alternative=P_OVERNIGHT
                    )
                self._validate_overnight(columns)
        else:
            if DURATION_H not in columns:
                missing = [name for name in TIMESTAMP_COLUMNS if name not in columns]
                if missing:
                    raise MissingColumnsError(TIMESTAMP_COLUMNS, missing, alternative=DURATION_H)
            self._validate_overnight(columns)

        if ELECTIVE not in columns and PRIORITY not in columns:
            raise MissingColumnsError([PRIORITY], [PRIORITY], alternative=ELECTIVE)

    @staticmethod
    def _validate_overnight(columns: set) -> None:
        if OVERNIGHT in columns:
            return
        missing = [name for name in (DATE_START, DATE_END) if name not in columns]
        if missing:
            raise MissingColumnsError([DATE_START, DATE_END], missing, alternative=OVERNIGHT)

    def prepare(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of frame with every rule input present.

        Deriving duration_h also drops exact duplicate rows.
        """
        self.validate(frame.columns)

        if self.method is ClassificationMethod.HYBRID_DEP:
            result = add_department_overnight_share(frame, self.department)
        elif DURATION_H not in frame.columns:
            result = add_duration(frame, DurationUnit.HOURS)
        else:
            result = frame.copy()

        if ELECTIVE not in result.columns:
            result[ELECTIVE] = derive_elective(result)

        if self.method is not ClassificationMethod.HYBRID_DEP:
            if OVERNIGHT not in result.columns:
                result[OVERNIGHT] = derive_overnight(result)
            if OVER24H not in result.columns:
                result[OVER24H] = derive_over24h(result)

        return result

    def classify(self, frame: pd.DataFrame) -> pd.DataFrame:
        """Return frame with indicator variables and patient_type added.

        Raises:
            MissingColumnsError: If required variables are absent.
        """
        result = self.prepare(frame)
        result[PATIENT_TYPE] = self.engine.classify(result)

        if logger.isEnabledFor(logging.DEBUG):
            for rule, count in self.engine.match_counts(result).items():
                logger.debug(f"{self.method.value} rule {rule}: {count} contacts")

        summary = self.summarize(result)
        logger.info(
            f"Classified {summary.total} contacts with {self.method.value} method: "
            + ", ".join(f"{label}={count}" for label, count in summary.by_label.items())
        )
        if summary.unlabeled and Config.WARN_UNMATCHED:
            logger.warning(
                f"{summary.unlabeled} of {summary.total} contacts matched no "
                f"{self.method.value} rule ({summary.unlabeled_missing_inputs} with "
                f"missing inputs, {summary.unlabeled_complete_inputs} with complete inputs)"
            )
        return result

    def summarize(self, frame: pd.DataFrame) -> ClassificationSummary:
        """Count labels in a classified frame."""
        labels = frame[PATIENT_TYPE]
        unlabeled = labels.isna()
        incomplete = frame[self.rule_set.fields()].isna().any(axis=1)

        return ClassificationSummary(
            method=self.method.value,
            total=len(frame),
            by_label={
                label.value: int((labels == label.value).sum()) for label in PatientType
            },
            unlabeled_missing_inputs=int((unlabeled & incomplete).sum()),
            unlabeled_complete_inputs=int((unlabeled & ~incomplete).sum()),
        )


def classify_patient_type(
    source: ContactSource,
    method: ClassificationMethod | str | None = None,
    output: OutputFormat | str = OutputFormat.FRAME,
    department: str | None = None,
) -> pd.DataFrame | Path:
    """Add the patient_type variable to a DNPR3 contact table.

    Args:
        source: A DataFrame, CsvSource or ParquetSource.
        method: cluster (default), hybrid or hybrid_dep.
        output: frame to return the table, csv/parquet to write
            <stem>_out.<format> next to the source file.
        department: hybrid_dep only; unit column used to aggregate
            p_overnight when the input lacks it.

    Returns:
        The classified table, or the written file path.

    Raises:
        MissingColumnsError: If required variables are absent.
        ValueError: If method or output is not recognized.

    Example:
        labeled = classify_patient_type(contacts)
        labeled = classify_patient_type(contacts, method="hybrid")
    """
    classifier = PatientTypeClassifier(method, department=department)
    output = coerce_enum(OutputFormat, output)

    frame = load_source(source)
    result = classifier.classify(frame)

    return write_output(result, source, output)
