"""Human-readable rendering of fetch options for diagnostics."""

import json
from typing import Any, Dict, Optional

from .config import PluginConfig

MASKED_FIELDS = ("accessToken", "spaceId")


def mask_text(value: str) -> str:
    """Hide all but the last quarter of a secret (at most 4 characters shown)."""
    hidden = len(value) - min(4, len(value) // 4)
    return "*" * hidden + value[hidden:]


def _format_value(key: str, value: Any) -> str:
    if callable(value):
        return "[Function]"
    if key in MASKED_FIELDS and isinstance(value, str):
        return json.dumps(mask_text(value))
    return json.dumps(value, default=str)


def format_plugin_options_for_cli(options: Dict[str, Any], errors: Optional[Dict[str, str]] = None) -> str:
    """
    Render one line per option, masking secrets and appending error hints.

    Keys come from the user's options, then defaults, then any key that has
    an error attached. Unset options show their default, or ``undefined``.

    Args:
        options: Options exactly as the user supplied them
        errors: Option name -> hint to append on that line

    Returns:
        Multi-line string, each line shaped `` key: value[ - hint]``
    """
    errors = errors or {}
    keys = list(dict.fromkeys([*options, *PluginConfig.DEFAULT_OPTIONS, *errors]))

    lines = []
    for key in keys:
        if options.get(key) is not None:
            display = _format_value(key, options[key])
        elif key in PluginConfig.DEFAULT_OPTIONS:
            display = _format_value(key, PluginConfig.DEFAULT_OPTIONS[key])
        else:
            display = "undefined"

        line = f" {key}: {display}"
        if errors.get(key):
            line += f" - {errors[key]}"
        lines.append(line)

    return "\n".join(lines)
