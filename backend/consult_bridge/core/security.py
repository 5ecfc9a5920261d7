import hashlib
import hmac
from typing import Optional

from consult_bridge.core.exceptions import SignatureError
from consult_bridge.core.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "x-retell-signature"
TIMESTAMP_HEADER = "x-retell-timestamp"


def compute_signature(secret: str, timestamp: str, body: bytes) -> str:
    """Hex HMAC-SHA256 of ``timestamp + body`` keyed with the webhook secret."""
    message = timestamp.encode("utf-8") + body
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_signature(
    secret: str,
    body: bytes,
    signature: Optional[str],
    timestamp: Optional[str],
) -> None:
    """Raise SignatureError unless ``signature`` matches the request.

    There is exactly one accepted format: the hex digest produced by
    ``compute_signature``, sent in the signature header alongside the
    timestamp header it was computed with.
    """
    if not signature or not timestamp:
        logger.warning("AUTH: Webhook request is missing signature headers.")
        raise SignatureError("Missing signature headers")

    expected = compute_signature(secret, timestamp, body)
    if not hmac.compare_digest(expected, signature.strip().lower()):
        logger.warning("AUTH: Webhook signature mismatch.")
        raise SignatureError("Invalid signature")
