"""Share codec - Encodes a whole Design into a URL-safe token and back.

Token format:
    urlsafe_base64(utf8(json(design.to_dict())))

The JSON uses sorted keys and compact separators, so equal designs always
produce the same token. Decoding accepts standard base64 as well, which is
what links from the first version of the app contain.

Failures:
    MalformedToken: not base64 / UTF-8 / JSON
    InvalidPayload: valid JSON but not a well-formed design record

Callers that must never fail (page load) use decode_or_default().
"""

import base64
import binascii
import json
import logging
from urllib.parse import urlencode

from yard_planner.constants import ShareConfig
from yard_planner.model.design import Design
from yard_planner.model.message import LoadFailedMessage

logger = logging.getLogger(__name__)


class ShareTokenError(ValueError):
    """Base class for token decoding failures."""


class MalformedToken(ShareTokenError):
    """Token is not validly structured text (base64 / UTF-8 / JSON)."""


class InvalidPayload(ShareTokenError):
    """Token decodes to JSON that is not a well-formed design record."""


def encode(design: Design) -> str:
    """Encode the full design as a token suitable for a single URL query value."""
    payload = json.dumps(design.to_dict(), sort_keys=True, separators=(",", ":"), allow_nan=False)
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def _b64decode(token: str) -> bytes:
    """Decode URL-safe or standard base64, tolerating missing padding."""
    cleaned = token.strip().replace("-", "+").replace("_", "/")
    cleaned += "=" * (-len(cleaned) % 4)
    return base64.b64decode(cleaned, validate=True)


def _reject_constant(name: str) -> None:
    """JSON allows NaN and Infinity; a design never contains them."""
    raise ValueError(f"Non-finite number {name} in payload")


def decode(token: str) -> Design:
    """Decode a token back into a Design.

    Raises:
        MalformedToken: If the token is not base64-encoded UTF-8 JSON.
        InvalidPayload: If the JSON is not a well-formed design record.
    """
    if not isinstance(token, str) or not token.strip():
        raise MalformedToken("Token is empty")

    try:
        raw = _b64decode(token).decode("utf-8")
        data = json.loads(raw, parse_constant=_reject_constant)
    except (binascii.Error, UnicodeDecodeError, ValueError, RecursionError) as e:
        raise MalformedToken(f"Token is not valid encoded JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidPayload(f"Expected a design object, got {type(data).__name__}")

    version = data.get(ShareConfig.KEY_VERSION, ShareConfig.SCHEMA_VERSION)
    if not isinstance(version, int) or version > ShareConfig.SCHEMA_VERSION:
        raise InvalidPayload(f"Unsupported design version {version!r}")

    try:
        return Design.from_dict(data=data)
    except (KeyError, TypeError, ValueError, OverflowError) as e:
        raise InvalidPayload(f"Malformed design record: {e!r}") from e


def decode_or_default(token: str | None) -> tuple[Design, LoadFailedMessage | None]:
    """Decode a token, falling back to the empty design instead of failing.

    Args:
        token: Query parameter value, None when the page has no shared design

    Returns:
        Tuple of (design, message). message is None on success or when no
        token was given, and a LoadFailedMessage when decoding failed.
    """
    if token is None:
        return Design(), None
    try:
        design = decode(token=token)
    except ShareTokenError as e:
        logger.warning(f"[SHARE] Failed to load design from token: {e}")
        reason = "the link is damaged" if isinstance(e, MalformedToken) else "the link does not contain a yard design"
        return Design(), LoadFailedMessage(reason=reason)
    logger.info(f"[SHARE] Loaded {design!r}")
    return design, None


def build_share_url(base_url: str, design: Design) -> str:
    """Full shareable URL carrying the design in the query string."""
    base = base_url.split("?", 1)[0]
    return f"{base}?{urlencode({ShareConfig.QUERY_PARAM: encode(design=design)})}"
