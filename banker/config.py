"""
Configuration constants for the Banker's Safe-State Checker.
"""

# Largest quantity accepted for a single resource type (small unsigned counter)
MAX_UNITS = 255

# Display
PROCESS_PREFIX = "P"
SEQUENCE_SEPARATOR = " -> "
