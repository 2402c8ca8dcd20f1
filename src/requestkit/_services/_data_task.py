import ssl
import threading
from concurrent.futures import Executor
from logging import getLogger
from typing import Callable, Optional, Protocol, Tuple

from httpx import Client

from .._utils._delivery import worker_executor
from .._utils._request_spec import RequestSpec
from .._utils._ssl_context import get_httpx_client_kwargs, get_ssl_context
from ..models.errors import CertificatePinningError, TaskAlreadyStartedError
from ..models.security import (
    CancelChallenge,
    ChallengeHandler,
    ClientIdentity,
    ClientIdentityChallenge,
    ServerTrustChallenge,
    UseCredential,
)

# (payload, status code, transport error); exactly one of error / status is set
Completion = Callable[[Optional[bytes], Optional[int], Optional[BaseException]], None]


class BaseDataTask(Protocol):
    def start(self, completion: Completion) -> None: ...


class _SingleUse:
    def __init__(self) -> None:
        self._started = False
        self._lock = threading.Lock()

    def _consume(self) -> None:
        with self._lock:
            if self._started:
                raise TaskAlreadyStartedError()
            self._started = True


class DataTask(_SingleUse):
    """Performs one HTTP request on a worker thread.

    Each task owns an httpx client scoped to its single request; the client is
    closed once the request completes and the task cannot be started again.
    When a challenge handler is given it decides on the client identity
    presented during the handshake and on whether the server is trusted
    before any request bytes are sent.
    """

    def __init__(
        self,
        request: RequestSpec,
        challenge_handler: Optional[ChallengeHandler] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        super().__init__()
        self._logger = getLogger("requestkit.transport")
        self._request = request
        self._challenge_handler = challenge_handler
        self._executor = executor or worker_executor()
        self._invalidated = False

    @property
    def request(self) -> RequestSpec:
        return self._request

    @property
    def is_invalidated(self) -> bool:
        return self._invalidated

    def start(self, completion: Completion) -> None:
        self._consume()
        self._executor.submit(self._run, completion)

    def _run(self, completion: Completion) -> None:
        data: Optional[bytes] = None
        status_code: Optional[int] = None
        error: Optional[BaseException] = None
        try:
            data, status_code = self._perform()
        except Exception as e:
            self._logger.debug(f"Transport error: {e!r}")
            error = e
        finally:
            self._invalidated = True
        completion(data, status_code, error)

    def _perform(self) -> Tuple[bytes, int]:
        request = self._request
        content = request.content
        if request.encode_body is not None:
            content = request.encode_body()

        self._logger.debug(f"Request: {request.method.value} {request.url}")
        self._logger.debug(f"HEADERS: {dict(request.headers)}")

        extensions = {}
        if self._challenge_handler is not None:
            extensions["trace"] = self._trace

        with Client(**self._client_kwargs()) as client:
            response = client.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                content=content,
                extensions=extensions,
            )
            return response.content, response.status_code

    def _client_kwargs(self) -> dict:
        session = self._request.session
        kwargs = get_httpx_client_kwargs(
            ssl_context=self._ssl_context(),
            timeout=session.timeout,
            follow_redirects=bool(session.follow_redirects),
        )
        if session.proxy:
            kwargs["proxy"] = session.proxy
        if session.transport is not None:
            kwargs["transport"] = session.transport
        return kwargs

    def _ssl_context(self) -> ssl.SSLContext:
        policy = self._request.trust_policy
        anchors = policy.anchor_certificates if policy is not None and policy.pins else None
        context = get_ssl_context(anchors)

        if self._challenge_handler is None:
            return context

        disposition = self._challenge_handler(
            ClientIdentityChallenge(host=self._request.url.host)
        )
        if isinstance(disposition, UseCredential) and isinstance(
            disposition.credential, ClientIdentity
        ):
            identity = disposition.credential
            context.load_cert_chain(
                certfile=identity.certfile,
                keyfile=identity.keyfile,
                password=identity.password,
            )
        return context

    def _trace(self, event: str, info: dict) -> None:
        """httpcore trace hook; evaluates trust once per TLS connection.

        Runs right after the handshake, before any request bytes are written,
        so a rejected server never sees headers or body. Redirect hops open
        their own connections and are evaluated the same way.
        """
        if not event.endswith("start_tls.complete"):
            return

        stream = info.get("return_value")
        ssl_object = stream.get_extra_info("ssl_object") if stream is not None else None
        if ssl_object is None:
            return

        leaf = ssl_object.getpeercert(binary_form=True)
        challenge = ServerTrustChallenge(
            host=getattr(ssl_object, "server_hostname", None) or self._request.url.host,
            certificate_chain=[leaf] if leaf else [],
        )
        if isinstance(self._challenge_handler(challenge), CancelChallenge):
            stream.close()
            raise CertificatePinningError(challenge.host)


class MockedDataTask(_SingleUse):
    """Completes with a canned outcome instead of touching the network.

    The completion still runs on the worker executor, never inside ``start``.
    """

    def __init__(
        self,
        data: Optional[bytes] = None,
        error: Optional[BaseException] = None,
        status_code: Optional[int] = None,
        executor: Optional[Executor] = None,
    ) -> None:
        super().__init__()
        self.data = data
        self.error = error
        self.status_code = status_code
        self._executor = executor or worker_executor()

    def start(self, completion: Completion) -> None:
        self._consume()
        getLogger("requestkit.transport").debug(
            f"Mocked response: status={self.status_code} error={self.error!r}"
        )
        if self.error is not None:
            self._executor.submit(completion, None, None, self.error)
        else:
            self._executor.submit(completion, self.data, self.status_code, None)
