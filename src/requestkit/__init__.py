"""Request construction, execution and response classification over httpx.

Example:
    from requestkit import RequestBuilder, RequestBuilderConfiguration, Ok

    builder = RequestBuilder(RequestBuilderConfiguration(base_url="https://api.test"))
    result = builder.path("users").bearer_auth(token).build(User).result()
    if isinstance(result, Ok):
        print(result.value)
"""

from ._config import RequestBuilderConfiguration
from ._services import Request, RequestBuilder
from ._utils._coding import JSONDecoder, JSONEncoder
from ._utils._delivery import (
    EventLoopDeliveryContext,
    ImmediateDeliveryContext,
    SerialDeliveryQueue,
)
from ._utils._request_spec import RequestSpec, SessionConfiguration
from .models import (
    ApiError,
    ApiErrorResponse,
    BaseUrlMissingError,
    BlockingResultError,
    CertificatePinningError,
    ClientIdentity,
    ContentType,
    DecodingError,
    EmptyDataError,
    EncodingError,
    Failure,
    HttpError,
    HttpMethod,
    Ok,
    PinnedCertificates,
    RequestError,
    Result,
    ServiceError,
    StaticIdentity,
    Success,
    TaskAlreadyStartedError,
)

__all__ = [
    "RequestBuilderConfiguration",
    "EventLoopDeliveryContext",
    "ImmediateDeliveryContext",
    "Request",
    "RequestBuilder",
    "SerialDeliveryQueue",
    "JSONDecoder",
    "JSONEncoder",
    "RequestSpec",
    "SessionConfiguration",
    "ApiError",
    "ApiErrorResponse",
    "BaseUrlMissingError",
    "BlockingResultError",
    "CertificatePinningError",
    "ClientIdentity",
    "ContentType",
    "DecodingError",
    "EmptyDataError",
    "EncodingError",
    "Failure",
    "HttpError",
    "HttpMethod",
    "Ok",
    "PinnedCertificates",
    "RequestError",
    "Result",
    "ServiceError",
    "StaticIdentity",
    "Success",
    "TaskAlreadyStartedError",
]
