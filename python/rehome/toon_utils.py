"""
Output-format selection for tool results.

A tool builds two views of its result: a nested dict for JSON clients and a
flat, primitives-only dict for TOON, whose tabular encoding only pays off on
uniform rows. Text mode renders through the tool's own formatter.
"""

import logging
from typing import Any, Callable, Optional, Union

logger = logging.getLogger("rehome.toon")

OUTPUT_FORMATS = ("text", "json", "toon")


def _encode_toon(toon_data: Any, tool_name: str) -> Optional[str]:
    from toon_format import encode

    try:
        return encode(toon_data)
    except Exception as e:
        logger.warning(f"{tool_name}: TOON encoding failed ({e}), returning JSON instead")
        return None


def create_toonable_result(
    json_data: Any,
    toon_data: Any,
    output_format: Optional[str],
    tool_name: str,
    text_formatter: Optional[Callable[[Any], str]] = None,
) -> Union[str, Any]:
    """
    Pick the representation a client asked for.

    ``output_format`` of None means text. Text without a formatter, and a
    TOON encoding error, both degrade to the JSON view.
    """
    mode = output_format or "text"
    if mode not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unknown output_format {output_format!r} (expected one of: {', '.join(OUTPUT_FORMATS)})"
        )

    if mode == "text":
        if text_formatter is not None:
            return text_formatter(json_data)
        logger.warning(f"{tool_name}: no text formatter, returning JSON")
    elif mode == "toon":
        encoded = _encode_toon(toon_data, tool_name)
        if encoded is not None:
            return encoded

    return json_data
