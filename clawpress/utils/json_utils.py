"""JSON rendering for the connection block shown on the settings page."""

import json
from typing import Any


def pretty_dumps(obj: Any) -> str:
    """Four-space indented JSON with unescaped slashes and unicode, for copy/paste blocks."""
    return json.dumps(obj, indent=4, ensure_ascii=False)
