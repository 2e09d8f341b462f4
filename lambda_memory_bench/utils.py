"""
Utility functions for the Lambda Memory Bench package.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)


def build_function_url(base_url: str, function_type: str, memory_mb: int) -> str:
    """
    Build the endpoint URL for one function family at one memory tier.

    Args:
        base_url: API base URL (a trailing slash is tolerated)
        function_type: Workload family name, e.g. 'basic'
        memory_mb: Memory tier in MB

    Returns:
        str: Endpoint URL of the form ``{base_url}/{function_type}-{memory_mb}``
    """
    return f"{base_url.rstrip('/')}/{function_type}-{memory_mb}"


def format_duration(milliseconds: float) -> str:
    """
    Format duration in milliseconds to human-readable string.

    Args:
        milliseconds: Duration in milliseconds

    Returns:
        str: Formatted duration
    """
    if milliseconds < 1000:
        return f"{milliseconds:.2f}ms"
    elif milliseconds < 60000:
        return f"{milliseconds/1000:.2f}s"
    else:
        minutes = int(milliseconds / 60000)
        seconds = (milliseconds % 60000) / 1000
        return f"{minutes}m {seconds:.2f}s"


def format_timestamp(timestamp: Optional[datetime] = None) -> str:
    """
    Format timestamp to ISO format.

    Args:
        timestamp: Datetime object (default: current UTC time)

    Returns:
        str: ISO formatted timestamp
    """
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    return timestamp.isoformat()


def file_safe_timestamp(timestamp: str) -> str:
    """Turn an ISO timestamp into something usable inside a file name."""
    return timestamp.replace(":", "-").replace(".", "-").replace("+", "-")


def safe_divide(numerator: float, denominator: float, default: float = 0) -> float:
    """
    Safely divide two numbers.

    Args:
        numerator: The numerator
        denominator: The denominator
        default: Default value if division by zero

    Returns:
        float: Division result or default
    """
    if denominator == 0:
        return default
    return numerator / denominator


def percent_change(baseline: float, value: float) -> float:
    """Relative change of ``value`` against ``baseline`` in percent (0 for a zero baseline)."""
    return safe_divide(value - baseline, baseline) * 100


def load_config_file(filepath: str) -> Dict[str, Any]:
    """
    Load a JSON or YAML file, chosen by extension.

    Args:
        filepath: Path to the file

    Returns:
        dict: Parsed content
    """
    try:
        with open(filepath, "r") as f:
            if filepath.endswith((".yaml", ".yml")):
                data = yaml.safe_load(f) or {}
            else:
                data = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {filepath}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Invalid content in {filepath}: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"Expected a mapping at the top level of {filepath}")
    return data


def save_json_file(data: Dict[str, Any], filepath: str, pretty: bool = True):
    """
    Save data to JSON file.

    Args:
        data: Data to save
        filepath: Output file path
        pretty: Whether to format JSON
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(filepath, "w") as f:
        if pretty:
            json.dump(data, f, indent=2, default=str)
        else:
            json.dump(data, f, default=str)
