import json
from typing import Any, Dict, Iterable, List

from fastapi import Request

from app.utils.logger import get_logger

logger = get_logger(__name__)


def flatten(nested_list: Iterable[Iterable[Any]]) -> List[Any]:
    return [item for sublist in nested_list for item in sublist]


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Buffer the request body and parse it as a JSON object.

    Empty bodies, malformed JSON, stream errors and non-object JSON all
    come back as an empty dict; nothing here is reported to the caller.
    """
    try:
        raw = await request.body()
    except Exception as e:
        logger.warning("Failed to read request body: %s", repr(e))
        return {}
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (ValueError, RecursionError):
        logger.debug("Ignoring malformed JSON body (%s bytes)", len(raw))
        return {}
    return data if isinstance(data, dict) else {}


def wants_plain_text(request: Request) -> bool:
    """True when the caller asked for newline text via Accept or ?format=text."""
    accept = request.headers.get("accept", "")
    return "text/plain" in accept or "format=text" in str(request.url)
