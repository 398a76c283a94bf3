"""
JSON parsing helpers for vision-model output.

The model is asked for a bare JSON object but sometimes wraps it in a
markdown fence, adds a sentence around it, or emits small syntax slips.
These helpers recover the object when that can be done mechanically.
"""

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def extract_json_text(response_text: str) -> str:
    """
    Cut the JSON object out of a model response.

    Strips a surrounding markdown fence and anything before the first ``{``
    or after the last ``}``. Returns the stripped text unchanged when no
    braces are found.
    """
    text = _FENCE_RE.sub("", response_text.strip())
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        return text
    return text[start:end + 1]


def try_parse_or_repair_json(json_str: str) -> Any:
    """
    Attempt to parse JSON string, applying repair strategies if initial parsing fails.

    Diacritics are preserved; Romanian names and addresses depend on them.

    Args:
        json_str: The JSON string to parse

    Returns:
        Parsed JSON value (normally a dict)

    Raises:
        json.JSONDecodeError: If JSON cannot be parsed even after repair attempts
    """
    try:
        return json.loads(json_str)
    except json.JSONDecodeError:
        repaired_json = json_str

        # Strategy 1: Fix missing commas between object members
        # Pattern: "value"\n    "key": -> "value",\n    "key":
        repaired_json = re.sub(r'("(?:[^"\\]|\\.)*")\s*\n\s*("(?:[^"\\]|\\.)*"\s*:)', r'\1,\n    \2', repaired_json)

        # Strategy 2: Fix missing colons after keys
        # Pattern: "key" value -> "key": value
        repaired_json = re.sub(r'"([^"]+)"\s+(["\d\[\{])', r'"\1": \2', repaired_json)

        # Strategy 3: Fix missing commas between objects or arrays in a list
        repaired_json = re.sub(r'([}\]])\s*\n\s*([{\[])', r'\1,\n    \2', repaired_json)

        # Strategy 4: Remove trailing commas before a closing bracket
        repaired_json = re.sub(r',\s*([}\]])', r'\1', repaired_json)

        # Strategy 5: Remove parenthetical text after quoted strings
        # Pattern: "text" (explanation) -> "text"
        repaired_json = re.sub(r'"([^"]*)" \([^)]*\)', r'"\1"', repaired_json)

        # Truncate after the last }
        last_brace = repaired_json.rfind('}')
        if last_brace != -1:
            repaired_json = repaired_json[:last_brace + 1]

        return json.loads(repaired_json)  # may raise; let it propagate for caller handling
