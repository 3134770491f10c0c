"""Centralized constants for kartei.

Scheduling defaults live here so the domain, the config layer and the CLI
all import from a single source of truth.
"""

# ---------- Learning ladder ----------
LEARNING_STEPS = (1, 6)  # days
GRADUATING_INTERVAL = 1  # days, first review interval after the ladder
EASY_INTERVAL = 4  # days, graduating straight from new/learning with Easy
SECOND_INTERVAL = 6  # days, second review after graduation

# ---------- Ease ----------
STARTING_EASE = 2.5
MINIMUM_EASE = 1.3
EASE_PRECISION = 2

# ---------- Rating modifiers (review state) ----------
HARD_MODIFIER = 0.8
GOOD_MODIFIER = 1.0
EASY_MODIFIER = 1.3

# ---------- Session mix ----------
LEARNING_SHARE = 0.3
REVIEW_SHARE = 0.5
NEW_SHARE = 0.2
DEFAULT_SESSION_LIMIT = 20

# ---------- Preview ----------
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365
