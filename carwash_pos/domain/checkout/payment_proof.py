"""Payment proof parsing and upload"""

import base64
import binascii
import logging
import re
import secrets
import time
from typing import Optional

from pydantic import BaseModel

from ...config import MAX_PAYMENT_PROOF_BYTES
from ...exceptions import InvalidImageFormat, InvalidInput
from ...storage import BlobStore

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:(image/[\w.+-]+);base64,(.+)$", re.DOTALL)


class PaymentProof(BaseModel):
    mime_type: str
    content: bytes

    @property
    def extension(self) -> str:
        # image/svg+xml -> svg, image/jpeg -> jpeg
        return self.mime_type.split("/", 1)[1].split("+", 1)[0].lower()


def parse_payment_proof(
    value: Optional[str], max_bytes: int = MAX_PAYMENT_PROOF_BYTES
) -> Optional[PaymentProof]:
    """Decode a data:<mime>;base64,<payload> string; None when no proof was sent"""
    if not value:
        return None

    match = DATA_URI_PATTERN.match(value.strip())
    if not match:
        raise InvalidImageFormat()

    mime_type, payload = match.groups()
    try:
        content = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageFormat("Payment proof is not valid base64") from None

    if not content:
        raise InvalidImageFormat("Payment proof is empty")
    if len(content) > max_bytes:
        raise InvalidInput(
            f"Payment proof exceeds {max_bytes / (1024 * 1024):.0f}MB limit. "
            f"Your file is {len(content) / (1024 * 1024):.2f}MB."
        )

    return PaymentProof(mime_type=mime_type.lower(), content=content)


def generate_proof_key(extension: str) -> str:
    """order-<epoch ms>-<12 hex chars>.<ext>"""
    return f"order-{int(time.time() * 1000)}-{secrets.token_hex(6)}.{extension}"


class PaymentProofUploader:
    def __init__(self, blob_store: BlobStore):
        self.blob_store = blob_store

    async def upload(self, proof: Optional[PaymentProof]) -> Optional[str]:
        """Store the proof and return its public URL (None if there is no proof)"""
        if proof is None:
            return None
        key = generate_proof_key(proof.extension)
        logger.info(f"📤 Uploading payment proof {key} ({proof.mime_type})")
        return await self.blob_store.put(key, proof.content, proof.mime_type)
