"""Centralized constants for brayne.

All scheduling numbers live here so the interval model, the engine and the
CLI agree on a single source of truth.
"""

from datetime import timedelta

# ---------- Time ----------
DAY = timedelta(days=1)

# ---------- Interval Model (SM-2) ----------
INITIAL_EFFORT_FACTOR = 2.5
MIN_EFFORT_FACTOR = 1.3
FIRST_INTERVAL = DAY
SECOND_INTERVAL = 6 * DAY
FAILURE_INTERVAL = DAY

# ---------- Scheduling Engine ----------
REPEAT_TIMEOUT = timedelta(hours=6)

# ---------- Ledger ----------
DEFAULT_LEDGER_FILE = "ledger.dat"
