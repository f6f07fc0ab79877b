#!/usr/bin/env python3
"""
Utility functions for atomic JSON file operations.

Prevents corruption by ensuring report files are never left half-written.
"""

import json
import os
import shutil
import tempfile


def atomic_json_save(data: dict, output_file: str) -> bool:
    """
    Save JSON data to file using atomic write operations.

    1. Write to a temporary file in the target directory
    2. Validate the JSON is readable
    3. Atomically move the temp file to the final location

    Args:
        data: Dictionary to save as JSON
        output_file: Target file path

    Returns:
        True if save succeeded

    Raises:
        OSError, TypeError: If the data cannot be written or serialized
    """
    directory = os.path.dirname(output_file) or "."
    os.makedirs(directory, exist_ok=True)

    temp_fd, temp_path = tempfile.mkstemp(suffix=".json", dir=directory, text=True)

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        with open(temp_path, encoding="utf-8") as f:
            json.load(f)

        shutil.move(temp_path, output_file)
        return True

    except Exception:
        if os.path.exists(temp_path):
            os.remove(temp_path)
        raise

