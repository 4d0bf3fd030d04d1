"""
Global constants used throughout the package
"""

# Exhaustive searches (connectivity numbers, cycle enumeration) log a warning
# when the number of elements they enumerate over reaches this size.
EXHAUSTIVE_SEARCH_WARNING_SIZE = 16

# Seconds before an exhaustive search raises SearchTimeoutError. None = unbounded.
DEFAULT_SEARCH_TIMEOUT: float | None = None

# How many search steps pass between two clock reads.
BUDGET_CHECK_INTERVAL = 64
