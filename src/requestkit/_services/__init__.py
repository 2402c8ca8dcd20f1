from ._data_task import DataTask, MockedDataTask
from ._request import Request
from ._response_actions import ResponseActions
from ._trust import evaluate_server_trust, make_challenge_handler
from .request_builder import RequestBuilder, RequestBuilderApplication

__all__ = [
    "DataTask",
    "MockedDataTask",
    "Request",
    "ResponseActions",
    "evaluate_server_trust",
    "make_challenge_handler",
    "RequestBuilder",
    "RequestBuilderApplication",
]
