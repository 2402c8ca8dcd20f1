from enum import Enum
from typing import Union


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    CONNECT = "CONNECT"


class ContentType(str, Enum):
    """MIME types accepted by ``RequestBuilder.content_type``.

    Anything outside this set can be passed as a plain string, see
    :func:`content_type_value`.
    """

    JSON = "application/json"
    CSS = "text/css"
    CSV = "text/csv"
    HTML = "text/html"
    GIF = "image/gif"
    JPEG = "image/jpeg"
    PNG = "image/png"
    PDF = "application/pdf"
    RAR = "application/vnd.rar"
    TXT = "text/plain"
    XML = "application/xml"
    ZIP = "application/zip"
    FORM = "application/x-www-form-urlencoded"


def content_type_value(content_type: Union[ContentType, str]) -> str:
    if isinstance(content_type, ContentType):
        return content_type.value
    return content_type
