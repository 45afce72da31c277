"""
Algorithms package for the Banker's Safe-State Checker.
Contains the Banker's safety algorithm.
"""
