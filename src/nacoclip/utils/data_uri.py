import base64
import binascii
import mimetypes
from pathlib import Path
from typing import Tuple, Union
from urllib.parse import unquote_to_bytes

DEFAULT_MIME = "application/octet-stream"


def encode_data_uri(payload: bytes, mime_type: str) -> str:
    mime = (mime_type or DEFAULT_MIME).split(";", 1)[0].strip() or DEFAULT_MIME
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime};base64,{encoded}"


def decode_data_uri(uri: str) -> Tuple[bytes, str]:
    """Return ``(payload, mime)`` for a ``data:`` URI.

    Raises ``ValueError`` if the URI is not a data URI or the payload is not
    valid base64.
    """
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError("not a data URI")

    header, _, data = uri[len("data:"):].partition(",")
    params = header.split(";")
    mime = params[0] or "text/plain"

    if "base64" in params[1:]:
        try:
            return base64.b64decode(data, validate=True), mime
        except binascii.Error as exc:
            raise ValueError(f"invalid base64 payload: {exc}") from exc

    return unquote_to_bytes(data), mime


def primary_type(mime_type: str) -> str:
    return (mime_type or "").split("/", 1)[0].strip().lower()


def essence(mime_type: str) -> str:
    """MIME type without parameters, lower-cased (``text/plain;charset=utf-8`` -> ``text/plain``)."""
    return (mime_type or "").split(";", 1)[0].strip().lower()


def guess_mime(path: Union[str, Path]) -> str:
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or DEFAULT_MIME
