"""
Utilities package for the Banker's Safe-State Checker.
Contains the logger and the scenario file and interactive input drivers.
"""
