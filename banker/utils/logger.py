"""
Logger utility for the Banker's Safe-State Checker.

Messages go to the console and, when a log file is given, to that file as
well. Debug messages are only shown in verbose mode.
"""

from typing import List, Optional
from datetime import datetime

from banker.algorithms.safety import format_sequence


LEVEL_PREFIXES = {
    "error": "[ERROR] ",
    "warning": "[WARNING] ",
    "debug": "[DEBUG] ",
    "info": "",
}


class CheckerLogger:
    """
    Logger for setup decisions and safety check results.

    Format: "P1 added: allocation=[2, 0, 0], max need=[3, 2, 2]"

    Opening the log file may raise OSError; callers decide how to report it.
    """

    def __init__(self, verbose: bool = False, log_file: Optional[str] = None, source: str = ""):
        """
        Args:
            verbose: Show debug messages
            log_file: Optional path that receives a copy of every message
            source: Input description written into the log file header
        """
        self.verbose = verbose
        self.log_file = log_file
        self.file_handle = None

        if log_file:
            self.file_handle = open(log_file, 'w', encoding='utf-8')
            started = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            self._emit_file(f"Safety Check Log - {started}")
            if source:
                self._emit_file(f"Input: {source}")
            self._emit_file("="*60 + "\n")

    def log(self, message: str, level: str = "info") -> None:
        """
        Log a message at the given level (info, debug, warning, error).
        """
        if level == "debug" and not self.verbose:
            return

        line = LEVEL_PREFIXES.get(level, "") + message
        print(line)
        self._emit_file(line)

    def _emit_file(self, line: str) -> None:
        if self.file_handle is None:
            return
        self.file_handle.write(line + "\n")
        self.file_handle.flush()

    def log_process_added(self, pid: int, allocation: List[int], max_need: List[int]) -> None:
        """Log a successfully committed process."""
        self.log(f"P{pid} added: allocation={allocation}, max need={max_need}", "debug")

    def log_rejected(self, what: str, error: Exception) -> None:
        """
        Log a rejected input.

        Args:
            what: What was being entered (e.g. "P2 allocation")
            error: Validation or parse error describing the problem
        """
        self.log(f"{what} rejected: {error}", "error")

    def log_system_state(self, state_str: str) -> None:
        """Log the full state tables (verbose mode only)."""
        if self.verbose:
            self.log(f"System State:\n{state_str}", "debug")

    def log_safety_result(
        self,
        is_safe: bool,
        sequence: List[int],
        unfinished: Optional[List[int]] = None
    ) -> None:
        """
        Log the outcome of a safety check.

        Args:
            is_safe: Whether a safe sequence exists
            sequence: Safe sequence (empty when unsafe)
            unfinished: PIDs that could not be shown to finish (debug only)
        """
        if is_safe:
            self.log("System is in a safe state.")
            self.log(f"  Safe sequence: {format_sequence(sequence)}")
        else:
            self.log("System is in an unsafe state! Deadlock potential exists", "error")
            if unfinished:
                pids_str = ", ".join(f"P{pid}" for pid in unfinished)
                self.log(f"  Cannot complete: [{pids_str}]", "debug")

    def close(self) -> None:
        """Close log file if open."""
        if self.file_handle:
            self.file_handle.close()
            self.file_handle = None

    def __enter__(self) -> "CheckerLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        """Cleanup on destruction."""
        self.close()
