"""DNPR3 field names and patient type thresholds.

This module contains the registry variable names used by the contact
("kontakter") table and the fixed cut-offs of the patient type algorithms.
The thresholds come from the published cluster and hybrid proxies and must
not be tuned per dataset.
"""

# =============================================================================
# DNPR3 contact table variables
# =============================================================================

DATE_START = "dato_start"
TIME_START = "tidspunkt_start"
DATE_END = "dato_slut"
TIME_END = "tidspunkt_slut"
PRIORITY = "prioritet"

CONTACT_ID = "DW_EK_KONTAKT"
PERSON_ID = "PNR"

# Raw timestamp components needed to derive duration
TIMESTAMP_COLUMNS = [TIME_START, TIME_END, DATE_START, DATE_END]

# Read as text from CSV so dates, times and identifiers keep their formatting
TEXT_COLUMNS = TIMESTAMP_COLUMNS + [CONTACT_ID, PERSON_ID]


# =============================================================================
# Derived variables
# =============================================================================

DURATION_H = "duration_h"
ELECTIVE = "elective"
OVERNIGHT = "overnight"
OVER24H = "over24h"
P_OVERNIGHT = "p_overnight"
PATIENT_TYPE = "patient_type"


# =============================================================================
# Parsing
# =============================================================================

# dato_start/dato_slut are exported as month/day/year text
DATE_FORMAT = "%m/%d/%Y"

# Tried in order; the first format that parses wins
TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%H:%M:%S.%f")

# Priority codes starting with this prefix are elective ("ikke akut")
ELECTIVE_PRIORITY_PREFIX = "ATA3"


# =============================================================================
# Patient type thresholds
# =============================================================================

# Contacts of 24 hours or more count as over24h
OVER24H_HOURS = 24

# Cluster proxy
CLUSTER_ACUTE_MAX_HOURS = 9        # acute contacts shorter than this are outpatient
CLUSTER_ELECTIVE_MAX_HOURS = 3.5   # same-day elective contacts shorter than this are outpatient

# Hybrid proxy
HYBRID_ACUTE_MAX_HOURS = 4
HYBRID_ELECTIVE_MAX_HOURS = 2.6

# Hybrid department proxy: share of overnight contacts in the department
HYBRID_DEP_ACUTE_P_OVERNIGHT = 0.23
HYBRID_DEP_ELECTIVE_P_OVERNIGHT = 0.3


# =============================================================================
# Exhaustiveness sweeps (start, stop, step) per numeric variable
# =============================================================================

SWEEP_RANGES = {
    DURATION_H: (0.0, 48.0, 0.1),
    P_OVERNIGHT: (0.0, 1.0, 0.01),
}
DEFAULT_SWEEP_RANGE = (0.0, 100.0, 0.5)
