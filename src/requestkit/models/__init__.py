from .enums import ContentType, HttpMethod
from .errors import (
    ApiErrorResponse,
    BaseUrlMissingError,
    BlockingResultError,
    CertificatePinningError,
    DecodingError,
    EmptyDataError,
    EncodingError,
    HttpError,
    RequestError,
    ServiceError,
    TaskAlreadyStartedError,
)
from .results import ApiError, Failure, NoContent, Ok, Result, Success, Typed
from .security import (
    ClientIdentity,
    PinnedCertificates,
    StaticIdentity,
    TrustPolicy,
)

__all__ = [
    "ContentType",
    "HttpMethod",
    "ApiErrorResponse",
    "BaseUrlMissingError",
    "BlockingResultError",
    "CertificatePinningError",
    "DecodingError",
    "EmptyDataError",
    "EncodingError",
    "HttpError",
    "RequestError",
    "ServiceError",
    "TaskAlreadyStartedError",
    "ApiError",
    "Failure",
    "NoContent",
    "Ok",
    "Result",
    "Success",
    "Typed",
    "ClientIdentity",
    "PinnedCertificates",
    "StaticIdentity",
    "TrustPolicy",
]
