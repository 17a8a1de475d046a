"""Patient type rules engine.

This module provides deterministic patient type classification of DNPR3
contacts. Each algorithm is a rule table (ordered predicate/label pairs)
applied first-match to every row of a contact DataFrame.

Architecture:
    Contacts → Indicator derivation → Rules Engine → patient_type
"""

from .schemas import (
    Predicate,
    Compare,
    And,
    Or,
    Not,
    Field,
    Flag,
    Rule,
    RuleSet,
)
from .rule_sets import (
    CLUSTER_RULES,
    HYBRID_RULES,
    HYBRID_DEP_RULES,
    RULE_SETS,
    get_rule_set,
)
from .engine import (
    PatientTypeRulesEngine,
    ExhaustivenessReport,
    build_domain_grid,
    check_exhaustiveness,
)

__all__ = [
    # Expression tree
    "Predicate",
    "Compare",
    "And",
    "Or",
    "Not",
    "Field",
    "Flag",
    "Rule",
    "RuleSet",
    # Rule tables
    "CLUSTER_RULES",
    "HYBRID_RULES",
    "HYBRID_DEP_RULES",
    "RULE_SETS",
    "get_rule_set",
    # Engine
    "PatientTypeRulesEngine",
    "ExhaustivenessReport",
    "build_domain_grid",
    "check_exhaustiveness",
]
