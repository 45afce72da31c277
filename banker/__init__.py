"""
Banker's Safe-State Checker.
Resource-state model and Banker's safety algorithm for deadlock avoidance.
"""

__version__ = "1.0.0"
