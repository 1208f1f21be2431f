"""Centralized constants for the mneme scheduler.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- History ----------
HISTORY_LIMIT = 20
RECENT_WINDOW = 5
DEFAULT_TIME_MINUTES = 30.0
DEFAULT_CONFIDENCE = 3
DEFAULT_CORRECTNESS = 0.0

# ---------- Input domains ----------
CORRECTNESS_RANGE = (0.0, 1.0)
CONFIDENCE_RANGE = (1, 5)

# ---------- Empty-history analysis ----------
EMPTY_OVERALL_SCORE = 0.5
EMPTY_TIME_EFFICIENCY = 1.0
EMPTY_RECENT_CORRECTNESS = 0.5
EMPTY_AVERAGE_CONFIDENCE = 3.0

# ---------- Score blend ----------
CORRECTNESS_WEIGHT = 0.6
CONFIDENCE_WEIGHT = 0.3
EFFICIENCY_WEIGHT = 0.1
SCORE_BOUNDS = (0.1, 1.0)
CONFIDENCE_SCALE = 5.0
EFFICIENCY_SCALE = 2.0

# ---------- Time efficiency ----------
REFERENCE_MINUTES = 60.0
MIN_AVERAGE_MINUTES = 1.0
TIME_EFFICIENCY_BOUNDS = (0.1, 2.0)
TIME_EFFICIENCY_FACTOR_BOUNDS = (0.8, 1.5)

# ---------- Interval ----------
NEW_CONCEPT_INTERVAL = 1
INTERVAL_BOUNDS = (1, 30)
IMPROVING_INTERVAL_MULTIPLIER = 1.2
DECLINING_INTERVAL_MULTIPLIER = 0.8
HIGH_VARIANCE_THRESHOLD = 0.3
LOW_VARIANCE_THRESHOLD = 0.1
HIGH_VARIANCE_MULTIPLIER = 0.7  # erratic
LOW_VARIANCE_MULTIPLIER = 1.1  # consistent

# ---------- Ease factor (SM-2) ----------
DEFAULT_EASE_FACTOR = 2.5
EASE_BOUNDS = (1.3, 3.0)
EASE_TREND_STEP = 0.1

# ---------- Persistence ----------
MAX_WRITE_RETRIES = 3
