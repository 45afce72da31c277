"""
Interactive input for the Banker's Safe-State Checker.

Prompts for the resource capacities and then for each process's allocation
and maximum need, re-asking whenever a line is rejected. Already-added
processes are kept when a later one is rejected.
"""

from typing import Callable, List, Optional

from banker.config import MAX_UNITS
from banker.errors import ExceedsCapacity, LengthMismatch, ValidationError
from banker.models.system_state import SystemBuilder, SystemState
from banker.models.vector import as_vector, first_exceeding
from banker.utils.logger import CheckerLogger


InputFn = Callable[[str], str]


class InputError(ValueError):
    """Raised when an input line cannot be parsed into quantities."""
    pass


def parse_quantities(line: str) -> List[int]:
    """
    Parse a whitespace-separated line of quantities.

    Args:
        line: Raw input line, e.g. "10 5 7"

    Returns:
        List of integers in 0..MAX_UNITS

    Raises:
        InputError: If a token is not an integer or is out of range
    """
    values = []
    for token in line.split():
        try:
            value = int(token)
        except ValueError:
            raise InputError(
                f"Invalid number input: {token!r}. "
                f"Please enter space-separated positive integers."
            )
        if value < 0 or value > MAX_UNITS:
            raise InputError(f"Invalid number input: {value} is not between 0 and {MAX_UNITS}.")
        values.append(value)
    return values


def read_yes_no(prompt: str, input_fn: InputFn = input, logger: Optional[CheckerLogger] = None) -> bool:
    """
    Ask a yes/no question until a valid answer is given.

    Accepts y, yes, n, no (case-insensitive).
    """
    while True:
        answer = input_fn(prompt).strip().lower()
        if answer in ("y", "yes"):
            return True
        if answer in ("n", "no"):
            return False
        if logger:
            logger.log("Invalid input. Please enter 'y' or 'n'.", "warning")


def collect_system(input_fn: InputFn = input, logger: Optional[CheckerLogger] = None) -> Optional[SystemState]:
    """
    Interactively declare resources and processes, then finalize.

    Args:
        input_fn: Line reader taking a prompt (defaults to builtin input)
        logger: Logger for rejected inputs and progress

    Returns:
        Validated SystemState, or None if setup was abandoned (invalid
        overall state or end of input)
    """
    logger = logger or CheckerLogger()

    try:
        builder = _read_capacity(input_fn, logger)

        logger.log("\n--- Process Creation ---")
        while True:
            pid = builder.next_pid
            logger.log(f"\n --- Enter details for P{pid} ---")

            n = builder.num_resources
            allocation = _read_process_vector(
                f"Enter current allocation for P{pid} ({n} values): ",
                f"P{pid} allocation", builder, input_fn, logger
            )
            max_need = _read_process_vector(
                f"Enter maximum need for P{pid} ({n} values): ",
                f"P{pid} max need", builder, input_fn, logger
            )

            try:
                builder.add_process(allocation, max_need)
            except ValidationError as e:
                logger.log_rejected(f"P{pid}", e)
                logger.log(f"Please re-enter details for P{pid}")
                continue
            logger.log_process_added(pid, allocation, max_need)

            if not read_yes_no("Create another process? [y/n]: ", input_fn, logger):
                break
    except EOFError:
        logger.log("Input ended before setup was complete.", "error")
        return None

    try:
        return builder.finalize()
    except ValidationError as e:
        logger.log(str(e), "error")
        logger.log("Cannot proceed due to invalid initial resource allocation.")
        return None


def _read_capacity(input_fn: InputFn, logger: CheckerLogger) -> SystemBuilder:
    """Prompt until a valid, non-empty resources array is entered."""
    logger.log("--- Banker's Algorithm Initialization ---")
    while True:
        line = input_fn("Enter resources array (e.g., 10 5 7): ")
        try:
            return SystemBuilder(parse_quantities(line))
        except (InputError, ValidationError) as e:
            logger.log_rejected("Resources array", e)


def _read_process_vector(
    prompt: str,
    what: str,
    builder: SystemBuilder,
    input_fn: InputFn,
    logger: CheckerLogger
) -> List[int]:
    """
    Prompt until a vector with one entry per resource type, each within
    total capacity, is entered.
    """
    while True:
        line = input_fn(prompt)
        try:
            values = parse_quantities(line)
            if len(values) != builder.num_resources:
                raise LengthMismatch(builder.num_resources, len(values), what)
            over = first_exceeding(as_vector(values, what), builder.capacity)
            if over is not None:
                raise ExceedsCapacity(over, values[over], int(builder.capacity[over]), what)
            return values
        except (InputError, ValidationError) as e:
            logger.log_rejected(what, e)
            logger.log("Try again")
