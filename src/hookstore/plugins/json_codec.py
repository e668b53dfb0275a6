"""JSON encode/decode plugin.

Values are serialized with :func:`json.dumps` on the way into the backend and
parsed again on the way out, so structured values survive backends that only
store strings.
"""

import json
import logging

from hookstore.types import UNSET

logger = logging.getLogger(__name__)

ENCODE_METHODS = ("set_item", "multi_set", "merge_item", "multi_merge")
DECODE_METHODS = ("get_item", "multi_get")


def encode(envelope, options=None):
    """Serialize the envelope value unless it is unset or already encoded."""
    if envelope.get("json") or envelope.get("value", UNSET) is UNSET:
        return None
    return {"value": json.dumps(envelope["value"]), "json": True}


def decode(envelope, options=None):
    """Parse a stored JSON string; missing values stay None."""
    if envelope.get("json"):
        return None

    value = envelope.get("value")
    if not isinstance(value, (str, bytes, bytearray)):
        return None
    return {"value": json.loads(value), "json": True}


def json_codec(ctx):
    """The JSON encode/decode plugin."""
    ctx.before({method: encode for method in ENCODE_METHODS})
    ctx.after({method: decode for method in DECODE_METHODS})
    logger.debug(f"JSON codec enabled for {ctx.pattern!r}")
