import json
import logging
import os
import tempfile
from typing import Any

logger = logging.getLogger(__name__)


def read_json_file(filepath: str, default: Any) -> Any:
    """
    Reads a JSON document from filepath.
    Returns default if the file doesn't exist, is empty or cannot be decoded.
    """
    try:
        with open(filepath, 'r') as f:
            content = f.read()
            if not content:
                return default
            return json.loads(content)
    except FileNotFoundError:
        return default
    except json.JSONDecodeError:
        logger.warning("Could not decode JSON from %s, starting from empty state", filepath)
        return default


def write_json_file(filepath: str, data: Any) -> None:
    """
    Writes data to filepath, replacing the old file only once the new one is complete.
    Each write goes through its own temporary file, so concurrent writers never
    share one.
    """
    directory = os.path.dirname(filepath) or "."
    os.makedirs(directory, exist_ok=True)
    with tempfile.NamedTemporaryFile('w', dir=directory, suffix=".tmp", delete=False) as f:
        json.dump(data, f, indent=4)
        tmp_path = f.name
    try:
        os.replace(tmp_path, filepath)
    except OSError:
        os.unlink(tmp_path)
        raise
