"""
Models package for the Banker's Safe-State Checker.
Contains resource vectors, processes and the system state.
"""
