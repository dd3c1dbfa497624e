"""Lenient parsing of structured (JSON) model output."""

import json
import re

from magician.core.typing import JSONDict

FORMAT_WARNING = "Response could not be formatted as JSON"

_FENCE = re.compile(r"^\s*```(?:json)?\s*\n(.*?)\n?\s*```\s*$", re.DOTALL | re.IGNORECASE)


def _loads_object(text: str) -> JSONDict | None:
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def parse_structured(text: str) -> JSONDict:
    """Parse a JSON object from model output.

    Never raises: unparseable output is returned as raw text under
    ``response`` with a ``warning`` field attached.
    """
    data = _loads_object(text)
    if data is None:
        match = _FENCE.match(text)
        if match:
            data = _loads_object(match.group(1))
    if data is None:
        return {"response": text, "warning": FORMAT_WARNING}
    return data
