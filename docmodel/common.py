"""
Common utility functions for docmodel.
"""

import os
from enum import Enum
from typing import Any, List, Optional


def type_token_name(token: Any) -> Optional[str]:
    """
    Resolve a native type token to its name.

    Tokens are either type names ('String', 'ObjectID', 'date') or type
    constructors (str, datetime.datetime, decimal.Decimal) which resolve to
    their class name.
    """
    if token is None:
        return None
    if isinstance(token, str):
        return token.strip()
    name = getattr(token, '__name__', None)
    if isinstance(name, str):
        return name
    return None


def enum_symbols(values: Any) -> Optional[List[Any]]:
    """
    Flatten an enum declaration into a fresh list of permitted values.

    Accepts a list or tuple of literals, a {'values': [...]} options mapping
    or a Python Enum class.
    """
    if values is None:
        return None
    if isinstance(values, type) and issubclass(values, Enum):
        return [member.value for member in values]
    if isinstance(values, dict):
        values = values.get('values')
        if values is None:
            return None
    if isinstance(values, (list, tuple)):
        return list(values)
    return [values]


def write_text_file(file_path: str, content: str) -> None:
    """Write text to a file, creating the parent directory if needed."""
    output_dir = os.path.dirname(file_path)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as file:
        file.write(content)
