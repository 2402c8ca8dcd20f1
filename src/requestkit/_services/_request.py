import asyncio
from concurrent.futures import Future
from logging import getLogger
from typing import Any, Callable, Generic, Optional, Type, TypeVar

from .._utils._coding import DataDecoder
from .._utils._delivery import DeliveryContext, main_queue
from .._utils.constants import (
    DEFAULT_STATUS_CODE,
    EMPTY_OBJECT_PAYLOAD,
    HTTP_ERROR_STATUS_RANGE,
)
from ..models.errors import (
    BlockingResultError,
    DecodingError,
    EmptyDataError,
    HttpError,
    ServiceError,
)
from ..models.results import ApiError, Expectation, Failure, NoContent, Ok, Result
from ._data_task import BaseDataTask
from ._response_actions import ResponseActions

T = TypeVar("T")
E = TypeVar("E")


class Request(Generic[T, E]):
    """A single-use request whose outcome is delivered as a ``Result``.

    The transport outcome is classified on the worker thread; response actions
    and the completion are dispatched to the delivery context, actions first.
    """

    def __init__(
        self,
        data_task: BaseDataTask,
        decoder: DataDecoder,
        expectation: Expectation,
        api_error_type: Optional[Type[E]] = None,
        response_actions: Optional[ResponseActions] = None,
        delivery_context: Optional[DeliveryContext] = None,
    ) -> None:
        self._logger = getLogger("requestkit.request")
        self._data_task = data_task
        self._decoder = decoder
        self._expectation = expectation
        self._api_error_type = api_error_type
        self._response_actions = response_actions or ResponseActions()
        self._delivery = delivery_context or main_queue()

    @property
    def data_task(self) -> BaseDataTask:
        return self._data_task

    @property
    def expectation(self) -> Expectation:
        return self._expectation

    def start(self, completion: Callable[[Result[T, E]], None]) -> None:
        def on_outcome(
            data: Optional[bytes],
            status_code: Optional[int],
            error: Optional[BaseException],
        ) -> None:
            result = self._handle(data, status_code, error)
            self._delivery.dispatch(lambda: completion(result))

        self._data_task.start(on_outcome)

    def result(self, timeout: Optional[float] = None) -> Result[T, E]:
        """Start the request and block until its result is delivered.

        Raises ``BlockingResultError`` when called from the delivery context
        itself, since that context is the one that would deliver the result.
        """
        owns_current_thread = getattr(self._delivery, "owns_current_thread", None)
        if owns_current_thread is not None and owns_current_thread():
            raise BlockingResultError()

        future: Future = Future()
        self.start(future.set_result)
        return future.result(timeout)

    async def start_async(self) -> Result[T, E]:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def complete(result: Result[T, E]) -> None:
            loop.call_soon_threadsafe(_resolve, future, result)

        self.start(complete)
        return await future

    def _handle(
        self,
        data: Optional[bytes],
        status_code: Optional[int],
        error: Optional[BaseException],
    ) -> Result[T, E]:
        if error is not None:
            service_error = error if isinstance(error, ServiceError) else ServiceError(error)
            self._logger.debug(f"Classified: {service_error}")
            return Failure(service_error)

        status = status_code if status_code is not None else DEFAULT_STATUS_CODE
        self._response_actions.fire(status, self._delivery)

        result = self.classify(data, status)
        self._logger.debug(f"Classified status {status}: {type(result).__name__}")
        return result

    def classify(self, data: Optional[bytes], status_code: int) -> Result[T, E]:
        if status_code in HTTP_ERROR_STATUS_RANGE:
            return Failure(HttpError(status_code))

        if data is None:
            return Failure(EmptyDataError())

        return self._decode(data)

    def _decode(self, data: bytes) -> Result[T, E]:
        payload = data
        if isinstance(self._expectation, NoContent) and len(data) == 0:
            payload = EMPTY_OBJECT_PAYLOAD

        try:
            return Ok(self._decoder.decode(self._expectation.response_type, payload))
        except Exception as decode_error:
            if self._api_error_type is None:
                return Failure(DecodingError(decode_error, data))

            try:
                return ApiError(self._decoder.decode(self._api_error_type, payload))
            except Exception as api_error:
                # the success-type failure is the one reported
                self._logger.debug(f"API error decoding failed as well: {api_error}")
                return Failure(DecodingError(decode_error, data))


def _resolve(future: "asyncio.Future[Any]", result: Any) -> None:
    if not future.done():
        future.set_result(result)
