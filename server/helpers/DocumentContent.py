import base64

from database.exceptions import InvalidInput

DEFAULT_CONTENT_TYPE = "application/octet-stream"
SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def encode_data_url(content_type: str, data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type or DEFAULT_CONTENT_TYPE};base64,{encoded}"


def decode_data_url(url: str):
    """Split a ``data:<mime>;base64,<payload>`` reference into (mime, bytes)"""
    if not url.startswith("data:") or ";base64," not in url:
        raise InvalidInput("Document content is not a base64 data URL")
    header, payload = url[len("data:"):].split(";base64,", 1)
    try:
        data = base64.b64decode(payload, validate=True)
    except ValueError as e:
        raise InvalidInput(f"Document content is corrupt: {e}")
    return header or DEFAULT_CONTENT_TYPE, data


async def read_upload(upload):
    """
    Read an uploaded file to completion and turn it into a content reference.
    Returns (content_type, size, content_ref); any read failure propagates
    before a document record can be created.
    """
    data = await upload.read()
    content_type = upload.content_type or DEFAULT_CONTENT_TYPE
    return content_type, len(data), encode_data_url(content_type, data)


def format_bytes(size: int, decimals: int = 2) -> str:
    if size == 0:
        return "0 Bytes"
    decimals = max(decimals, 0)
    exponent = 0
    while exponent < len(SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / 1024 ** exponent, decimals)
    return f"{value:g} {SIZE_UNITS[exponent]}"
