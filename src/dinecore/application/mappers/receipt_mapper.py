from __future__ import annotations

import base64
import binascii
import re

from dinecore.domain.policies.payment import ReceiptAttachment, ReceiptInvalidError

_DATA_URL = re.compile(r"^data:(?P<content_type>[\w.+-]+/[\w.+-]+);base64,(?P<data>.+)$", re.S)

_EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
}


def receipt_from_data_url(value: str | None, filename: str = "receipt") -> ReceiptAttachment | None:
    """Decode the base64 data URL the browser sends for an attached receipt image."""
    if not value:
        return None
    match = _DATA_URL.match(value.strip())
    if match is None:
        raise ReceiptInvalidError("receipt must be a base64 data URL")
    content_type = match.group("content_type").lower()
    try:
        content = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ReceiptInvalidError("receipt data is not valid base64") from exc
    extension = _EXTENSIONS.get(content_type, "bin")
    return ReceiptAttachment(
        filename=f"{filename}.{extension}",
        content_type=content_type,
        content=content,
    )


def receipt_to_data_url(receipt: ReceiptAttachment) -> str:
    encoded = base64.b64encode(receipt.content).decode("ascii")
    return f"data:{receipt.content_type};base64,{encoded}"
