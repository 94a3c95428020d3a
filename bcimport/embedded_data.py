"""Extraction of JSON objects assigned to variables inside script text.

Grammar for one assignment::

    var <NAME> \\s* = \\s* { ...shortest run... } ;

The object body is matched non-greedily across lines and ends at the first
``};`` after the opening brace, then decoded as JSON.
"""

import json
import re
from typing import Any, Dict, Optional, Pattern

from .exceptions import MalformedStructuredData

TRALBUM_VARIABLE = "TralbumData"


def assignment_marker(variable: str) -> str:
    """Literal text that flags a script as holding the assignment."""
    return f"var {variable} ="


def assignment_pattern(variable: str) -> Pattern[str]:
    return re.compile(rf'var {re.escape(variable)}\s*=\s*({{.*?}});', re.DOTALL)


def find_assigned_object(script_text: str, variable: str = TRALBUM_VARIABLE) -> Optional[str]:
    """Return the raw object literal assigned to ``variable``, if present."""
    if not script_text or assignment_marker(variable) not in script_text:
        return None
    match = assignment_pattern(variable).search(script_text)
    return match.group(1) if match else None


def decode_object(text: str) -> Dict[str, Any]:
    """Decode an object literal as JSON.

    Raises:
        MalformedStructuredData: If the text is not a JSON object
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedStructuredData(f"Invalid embedded JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedStructuredData(f"Embedded data is a {type(data).__name__}, expected an object")
    return data
