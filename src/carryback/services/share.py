from __future__ import annotations

import base64
import binascii
import json
from typing import Any
from urllib.parse import urlencode, urlsplit, urlunsplit

from carryback.adapters.logging_utils import ctx, get_logger
from carryback.domain.deal import DealInputs

logger = get_logger(__name__)

SHARE_PARAM = "s"


def encode_state(inputs: DealInputs) -> str:
    """
    Reversible text encoding of a deal: JSON -> UTF-8 -> unpadded URL-safe base64.
    """
    raw = json.dumps(inputs.model_dump(), separators=(",", ":"), ensure_ascii=False)
    # padding is dropped so the code survives query-string encoding untouched
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def decode_state(code: str | None, fallback: Any = None) -> Any:
    """
    Inverse of ``encode_state``. Returns ``fallback`` on anything malformed
    instead of raising: bad base64, bad UTF-8, bad JSON, or a non-object.
    """
    if not code:
        return fallback
    try:
        s = code.strip()
        s += "=" * (-len(s) % 4)
        # accept both the URL-safe and the standard alphabet
        raw = base64.urlsafe_b64decode(s.replace("+", "-").replace("/", "_"))
        state = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        logger.warning("share_decode_failed", extra=ctx(error=str(e)))
        return fallback
    if not isinstance(state, dict):
        logger.warning("share_decode_not_object", extra=ctx(kind=type(state).__name__))
        return fallback
    return state


# Fields the form resets rather than keeps when a loaded state omits them.
_RESET_WHEN_MISSING: dict[str, Any] = {"selling_costs": 0.0, "logo_url": ""}


def apply_state(base: DealInputs, state: dict[str, Any] | None) -> DealInputs:
    """
    Overlay a decoded/saved state on ``base``. Keys that are absent or null
    keep the base value, except ``selling_costs`` and ``logo_url`` which fall
    back to their blank defaults. Unknown keys are dropped.
    """
    if not state:
        return base
    merged = base.model_dump()
    merged.update(_RESET_WHEN_MISSING)
    for key in DealInputs.model_fields:
        if state.get(key) is not None:
            merged[key] = state[key]
    return DealInputs(**merged)


def inputs_from_share(code: str | None, base: DealInputs | None = None) -> DealInputs:
    base = base or DealInputs()
    return apply_state(base, decode_state(code, None))


def share_url(inputs: DealInputs, base_url: str) -> str:
    parts = urlsplit(base_url)
    query = urlencode({SHARE_PARAM: encode_state(inputs)})
    return urlunsplit((parts.scheme, parts.netloc, parts.path or "/", query, ""))
