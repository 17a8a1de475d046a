"""Patient type rule tables.

Each algorithm is a RuleSet: an ordered list of (predicate, label) rows
evaluated first-match. Adding an algorithm means adding a table here and
registering it in RULE_SETS.
"""

from ..models import ClassificationMethod, PatientType, coerce_enum
from .criteria import (
    CLUSTER_ACUTE_MAX_HOURS,
    CLUSTER_ELECTIVE_MAX_HOURS,
    DURATION_H,
    ELECTIVE,
    HYBRID_ACUTE_MAX_HOURS,
    HYBRID_DEP_ACUTE_P_OVERNIGHT,
    HYBRID_DEP_ELECTIVE_P_OVERNIGHT,
    HYBRID_ELECTIVE_MAX_HOURS,
    OVER24H,
    OVERNIGHT,
    P_OVERNIGHT,
)
from .schemas import Field, Flag, Rule, RuleSet

elective = Flag(ELECTIVE)
overnight = Flag(OVERNIGHT)
over24h = Flag(OVER24H)
duration_h = Field(DURATION_H)
p_overnight = Field(P_OVERNIGHT)


CLUSTER_RULES = RuleSet(
    name=ClassificationMethod.CLUSTER.value,
    rules=(
        Rule(
            ~elective & ~over24h & (duration_h < CLUSTER_ACUTE_MAX_HOURS),
            PatientType.ACUTE_OUTPATIENT,
        ),
        Rule(
            (~elective & over24h)
            | (~elective & ~over24h & (duration_h >= CLUSTER_ACUTE_MAX_HOURS))
            | (elective & overnight)
            | (elective & ~overnight & (duration_h >= CLUSTER_ELECTIVE_MAX_HOURS)),
            PatientType.INPATIENT,
        ),
        Rule(
            elective & ~overnight & (duration_h < CLUSTER_ELECTIVE_MAX_HOURS),
            PatientType.ELECTIVE_OUTPATIENT,
        ),
    ),
)

HYBRID_RULES = RuleSet(
    name=ClassificationMethod.HYBRID.value,
    rules=(
        Rule(
            elective & ~overnight & (duration_h < HYBRID_ELECTIVE_MAX_HOURS),
            PatientType.ELECTIVE_OUTPATIENT,
        ),
        Rule(
            (elective & overnight)
            | (elective & ~overnight & (duration_h >= HYBRID_ELECTIVE_MAX_HOURS))
            | (~elective & over24h)
            | (~elective & ~over24h & (duration_h >= HYBRID_ACUTE_MAX_HOURS)),
            PatientType.INPATIENT,
        ),
        Rule(
            ~elective & ~over24h & (duration_h < HYBRID_ACUTE_MAX_HOURS),
            PatientType.ACUTE_OUTPATIENT,
        ),
    ),
)

HYBRID_DEP_RULES = RuleSet(
    name=ClassificationMethod.HYBRID_DEP.value,
    rules=(
        Rule(
            (~elective & (p_overnight >= HYBRID_DEP_ACUTE_P_OVERNIGHT))
            | (elective & (p_overnight >= HYBRID_DEP_ELECTIVE_P_OVERNIGHT)),
            PatientType.INPATIENT,
        ),
        Rule(
            ~elective & (p_overnight < HYBRID_DEP_ACUTE_P_OVERNIGHT),
            PatientType.ACUTE_OUTPATIENT,
        ),
        Rule(
            elective & (p_overnight < HYBRID_DEP_ELECTIVE_P_OVERNIGHT),
            PatientType.ELECTIVE_OUTPATIENT,
        ),
    ),
)


RULE_SETS = {
    ClassificationMethod.CLUSTER: CLUSTER_RULES,
    ClassificationMethod.HYBRID: HYBRID_RULES,
    ClassificationMethod.HYBRID_DEP: HYBRID_DEP_RULES,
}


def get_rule_set(method: ClassificationMethod | str) -> RuleSet:
    """Look up the rule table for a classification method.

    Raises:
        ValueError: If method is not a known ClassificationMethod.
    """
    return RULE_SETS[coerce_enum(ClassificationMethod, method)]
