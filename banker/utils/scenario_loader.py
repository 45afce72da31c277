"""
Scenario Loader for the Banker's Safe-State Checker.

Loads JSON scenario files and builds a validated SystemState from them.

Format:
    {
        "description": "optional text",
        "resources": [10, 5, 7],
        "processes": [
            {"allocation": [0, 1, 0], "max_need": [7, 5, 3]},
            ...
        ]
    }

Processes receive pids in file order (P0, P1, ...).
"""

import json
from typing import Any, Dict, List

from banker.models.system_state import SystemBuilder, SystemState


class ScenarioLoadError(Exception):
    """Exception raised when scenario file cannot be loaded or is malformed."""
    pass


def load_scenario(file_path: str) -> SystemState:
    """
    Load scenario from JSON file.

    Structural problems (missing file, bad JSON, missing or ill-typed fields)
    raise ScenarioLoadError. Resource-state problems (over-allocation,
    overcommitment, ...) raise the matching ValidationError unchanged.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Finalized, validated SystemState

    Raises:
        ScenarioLoadError: If file cannot be loaded or is malformed
        ValidationError: If the declared state is invalid
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ScenarioLoadError(f"Scenario file not found: {file_path}")
    except json.JSONDecodeError as e:
        raise ScenarioLoadError(f"Invalid JSON in scenario file: {e}")

    return build_from_dict(data)


def build_from_dict(data: Dict[str, Any]) -> SystemState:
    """
    Build a SystemState from already-parsed scenario data.

    Args:
        data: Scenario dictionary

    Returns:
        Finalized, validated SystemState
    """
    if not isinstance(data, dict):
        raise ScenarioLoadError("Scenario must be a JSON object")

    # Validate required fields
    if 'resources' not in data:
        raise ScenarioLoadError("Scenario missing 'resources' field")
    if 'processes' not in data:
        raise ScenarioLoadError("Scenario missing 'processes' field")

    resources = _require_list(data['resources'], "'resources'")
    builder = SystemBuilder(resources)

    processes = _require_list(data['processes'], "'processes'")
    for index, proc_data in enumerate(processes):
        allocation, max_need = _load_process(proc_data, index)
        builder.add_process(allocation, max_need)

    return builder.finalize()


def _load_process(proc_data: Dict[str, Any], index: int):
    """
    Extract allocation and max need vectors for one process entry.

    Args:
        proc_data: Process dictionary from scenario
        index: Position in the 'processes' list (becomes the pid)

    Returns:
        Tuple of (allocation, max_need) lists
    """
    if not isinstance(proc_data, dict):
        raise ScenarioLoadError(f"Process {index}: entry must be an object")

    # Validate required fields
    for field in ['allocation', 'max_need']:
        if field not in proc_data:
            raise ScenarioLoadError(f"Process {index}: missing required field '{field}'")

    allocation = _require_list(proc_data['allocation'], f"Process {index}: 'allocation'")
    max_need = _require_list(proc_data['max_need'], f"Process {index}: 'max_need'")
    return allocation, max_need


def _require_list(value: Any, what: str) -> List:
    """Ensure a scenario field holds a JSON array."""
    if not isinstance(value, list):
        raise ScenarioLoadError(f"{what} must be a list, got {type(value).__name__}")
    return value


def get_scenario_description(file_path: str) -> str:
    """
    Get description from scenario file without full loading.

    Args:
        file_path: Path to scenario JSON file

    Returns:
        Description string, or empty string if not present or unreadable
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return ''
    if not isinstance(data, dict):
        return ''
    return data.get('description', '')
