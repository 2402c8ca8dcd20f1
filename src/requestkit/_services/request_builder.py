import base64
from dataclasses import dataclass, field, replace
from functools import partial
from logging import getLogger
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Type, Union

from httpx import URL

from .._config import RequestBuilderConfiguration
from .._utils._coding import to_dictionary
from .._utils._request_spec import RequestSpec, SessionConfiguration
from .._utils._url import append_path_component, flatten_query, form_encode
from .._utils.constants import HEADER_AUTHORIZATION, HEADER_CONTENT_TYPE
from ..models.enums import ContentType, HttpMethod, content_type_value
from ..models.results import Success, expectation_for
from ..models.security import CertificatesProvider, IdentityProvider, TrustPolicy
from ._data_task import BaseDataTask, DataTask, MockedDataTask
from ._request import Request
from ._response_actions import ResponseActions
from ._trust import make_challenge_handler

RequestBuilderApplication = Callable[["RequestBuilder"], Any]


@dataclass(frozen=True)
class _Mocking:
    data: Optional[bytes] = None
    error: Optional[BaseException] = None
    status_code: Optional[int] = None


@dataclass
class _BuildInfo:
    url: URL
    method: HttpMethod = HttpMethod.GET
    headers: Dict[str, str] = field(default_factory=dict)
    encoded_body: Optional[bytes] = None
    encoded_path: str = ""
    query: Optional[List[Tuple[str, str]]] = None
    encode_action: Optional[Callable[[], bytes]] = None
    mocking: Optional[_Mocking] = None
    identity_provider: Optional[IdentityProvider] = None
    certificates_provider: Optional[CertificatesProvider] = None
    session: Optional[SessionConfiguration] = None
    timeout: Optional[float] = None


class RequestBuilder:
    """Fluent builder producing single-use ``Request`` objects.

    ``build()`` detaches the accumulated state into an immutable ``RequestSpec``
    and resets the builder to a fresh baseline, on which the configured
    applications are re-applied.

    Example:
        builder = RequestBuilder(RequestBuilderConfiguration(base_url="https://api.test"))
        request = builder.method(HttpMethod.POST).path("users").encode(user).build(User)
        result = request.result()
    """

    def __init__(self, configuration: RequestBuilderConfiguration) -> None:
        self._logger = getLogger("requestkit.builder")
        self._configuration = configuration
        self._build_info: _BuildInfo
        self.reset()

    @property
    def configuration(self) -> RequestBuilderConfiguration:
        return self._configuration

    def reset(self) -> "RequestBuilder":
        self._build_info = _BuildInfo(url=URL(self._configuration.base_url))
        for application in _applications(self._configuration.applications):
            application(self)
        return self

    # Auth

    def basic_auth(self, login: str, password: str) -> "RequestBuilder":
        token = base64.b64encode(f"{login}:{password}".encode("utf-8")).decode("ascii")
        self._build_info.headers[HEADER_AUTHORIZATION] = f"Basic {token}"
        return self

    def bearer_auth(self, token: str) -> "RequestBuilder":
        self._build_info.headers[HEADER_AUTHORIZATION] = f"Bearer {token}"
        return self

    def oauth(self, token: str) -> "RequestBuilder":
        self._build_info.headers[HEADER_AUTHORIZATION] = f"OAuth {token}"
        return self

    def auth(self, identity_provider: IdentityProvider) -> "RequestBuilder":
        self._build_info.identity_provider = identity_provider
        return self

    def ssl_pin(self, certificates_provider: CertificatesProvider) -> "RequestBuilder":
        self._build_info.certificates_provider = certificates_provider
        return self

    # Target

    def method(self, method: Union[HttpMethod, str]) -> "RequestBuilder":
        self._build_info.method = HttpMethod(method.upper())
        return self

    def path(self, path: str) -> "RequestBuilder":
        self._build_info.url = append_path_component(self._build_info.url, path)
        return self

    def headers(self, headers: Dict[str, str]) -> "RequestBuilder":
        self._build_info.headers.update(headers)
        return self

    def content_type(self, content_type: Union[ContentType, str]) -> "RequestBuilder":
        self._build_info.headers[HEADER_CONTENT_TYPE] = content_type_value(content_type)
        return self

    # Body and query

    def encode(self, body: Any) -> "RequestBuilder":
        """Encode ``body`` with the configured encoder right before sending."""
        self._build_info.encode_action = partial(self._configuration.encoder.encode, body)
        return self

    def form_encode(self, query: Any) -> "RequestBuilder":
        values = to_dictionary(query, self._configuration.encoder)
        self._build_info.headers[HEADER_CONTENT_TYPE] = ContentType.FORM.value
        self._build_info.encoded_body = (
            form_encode(flatten_query(values)) if values is not None else None
        )
        return self

    def url_encode(self, query: Any) -> "RequestBuilder":
        values = to_dictionary(query, self._configuration.encoder)
        if values is None:
            return self
        self._build_info.query = flatten_query(values)
        return self

    # Transport

    def timeout(self, value: float) -> "RequestBuilder":
        self._build_info.timeout = value
        return self

    def session(self, configuration: SessionConfiguration) -> "RequestBuilder":
        self._build_info.session = configuration
        return self

    def mock_response(
        self,
        data: Optional[bytes] = None,
        error: Optional[BaseException] = None,
        status_code: Optional[int] = None,
    ) -> "RequestBuilder":
        self._build_info.mocking = _Mocking(data=data, error=error, status_code=status_code)
        return self

    def build(
        self,
        response_type: Optional[Type[Any]] = Success,
        api_error_type: Optional[Type[Any]] = None,
    ) -> Request:
        info = self._build_info
        self.reset()

        spec = self._request_spec(info)
        self._logger.debug(f"Built {spec.method.value} {spec.url}")

        return Request(
            data_task=self._data_task(info, spec),
            decoder=self._configuration.decoder,
            expectation=expectation_for(response_type),
            api_error_type=api_error_type,
            response_actions=ResponseActions.from_provider(
                self._configuration.response_actions
            ),
            delivery_context=self._configuration.delivery_context,
        )

    def _request_spec(self, info: _BuildInfo) -> RequestSpec:
        url = append_path_component(info.url, info.encoded_path)
        if info.query is not None:
            url = url.copy_with(params=info.query)

        headers = dict(info.headers)
        if info.encode_action is not None and not _has_header(headers, HEADER_CONTENT_TYPE):
            headers[HEADER_CONTENT_TYPE] = ContentType.JSON.value

        return RequestSpec(
            method=info.method,
            url=url,
            headers=headers,
            content=info.encoded_body,
            encode_body=info.encode_action,
            trust_policy=_trust_policy(info),
            session=self._session_configuration(info),
        )

    def _session_configuration(self, info: _BuildInfo) -> SessionConfiguration:
        session = SessionConfiguration(
            timeout=self._configuration.timeout,
            follow_redirects=self._configuration.follow_redirects,
            transport=self._configuration.transport,
        )
        if info.session is not None:
            session = session.overlay(info.session)
        if info.timeout is not None:
            session = replace(session, timeout=info.timeout)
        return session

    def _data_task(self, info: _BuildInfo, spec: RequestSpec) -> BaseDataTask:
        executor = self._configuration.worker_executor
        if info.mocking is not None:
            return MockedDataTask(
                data=info.mocking.data,
                error=info.mocking.error,
                status_code=info.mocking.status_code,
                executor=executor,
            )

        handler = (
            make_challenge_handler(spec.trust_policy)
            if spec.trust_policy is not None
            else None
        )
        return DataTask(spec, challenge_handler=handler, executor=executor)


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(key.lower() == name.lower() for key in headers)


def _trust_policy(info: _BuildInfo) -> Optional[TrustPolicy]:
    if info.certificates_provider is None and info.identity_provider is None:
        return None

    pinned: Tuple[bytes, ...] = ()
    anchors: Tuple[bytes, ...] = ()
    if info.certificates_provider is not None:
        pinned = tuple(info.certificates_provider.certificates)
        anchors = tuple(getattr(info.certificates_provider, "anchors", ()) or ())

    identity = info.identity_provider.identity if info.identity_provider else None
    return TrustPolicy(
        pinned_certificates=pinned,
        anchor_certificates=anchors,
        identity=identity,
    )


def _applications(provider: Any) -> Iterable[RequestBuilderApplication]:
    if provider is None:
        return ()
    if hasattr(provider, "applications"):
        return provider.applications
    if callable(provider):
        return provider()
    return provider
