"""Shared constants for the ledger and metric calculations."""

# Simplified contract model: every pip is worth this much per standard lot.
PIP_VALUE_PER_LOT = 10.0

# Price multipliers turning a raw price move into pips
PIP_MULTIPLIER = 10000.0
JPY_PIP_MULTIPLIER = 100.0

# Balance differences within these tolerances are treated as float noise
BALANCE_TOLERANCE = 1e-6
BALANCE_REL_TOLERANCE = 1e-9

# Upper bounds accepted for trade inputs
MAX_PRICE = 1e9
MAX_LOTS = 1e6
MAX_AMOUNT = 1e12

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
