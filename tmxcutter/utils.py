"""
Utility functions for tmxcutter.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Iterable, Tuple
from .logging_config import get_logger

logger = get_logger('utils')


def save_json(data: Dict[str, Any], filepath: str, indent: int = 2) -> None:
    """Save data to a JSON file."""
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def sanitize_filename(name: str) -> str:
    """Convert a name to a safe filename."""
    invalid_chars = '<>:"/\\|?*'
    for char in invalid_chars:
        name = name.replace(char, '_')
    return name


def parse_association(value: str) -> Tuple[str, Path]:
    """
    Split a ``NAME=PATH`` texture association.
    
    The name may not be empty; everything after the first '=' is the path.
    
    Raises:
        ValueError: If the value has no '=' or an empty name or path
    """
    name, sep, path = value.partition('=')
    name = name.strip()
    path = path.strip()
    if not sep or not name or not path:
        raise ValueError(f"Expected NAME=PATH, got '{value}'")
    return name, Path(path)


def parse_associations(values: Iterable[str]) -> Dict[str, Path]:
    """Parse several ``NAME=PATH`` values; later entries win."""
    associations: Dict[str, Path] = {}
    for value in values:
        name, path = parse_association(value)
        if name in associations:
            logger.warning(f"Texture for '{name}' given twice; using {path}")
        associations[name] = path
    return associations
