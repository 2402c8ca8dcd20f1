import os
from concurrent.futures import Executor
from typing import Any, Optional

from dotenv import load_dotenv
from httpx import BaseTransport
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ._utils._coding import DataDecoder, DataEncoder, JSONDecoder, JSONEncoder
from ._utils._delivery import DeliveryContext, main_queue
from ._utils.constants import DEFAULT_TIMEOUT, DOTENV_FILE, ENV_BASE_URL, ENV_TIMEOUT
from .models.errors import BaseUrlMissingError


class RequestBuilderConfiguration(BaseModel):
    """Settings shared by every request a ``RequestBuilder`` produces.

    ``response_actions`` and ``applications`` accept providers: a value, a
    callable returning it, or an object exposing ``actions`` / ``applications``.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    base_url: str
    encoder: DataEncoder = Field(default_factory=JSONEncoder)
    decoder: DataDecoder = Field(default_factory=JSONDecoder)
    delivery_context: DeliveryContext = Field(default_factory=main_queue)
    worker_executor: Optional[Executor] = None
    timeout: float = DEFAULT_TIMEOUT
    follow_redirects: bool = False
    transport: Optional[BaseTransport] = None
    response_actions: Optional[Any] = None
    applications: Optional[Any] = None

    @field_validator("base_url")
    @classmethod
    def _require_base_url(cls, value: str) -> str:
        if not value:
            raise BaseUrlMissingError()
        return value

    @classmethod
    def from_env(cls, **overrides: Any) -> "RequestBuilderConfiguration":
        load_dotenv(dotenv_path=os.path.join(os.getcwd(), DOTENV_FILE))

        base_url = overrides.pop("base_url", None) or os.environ.get(ENV_BASE_URL)
        if not base_url:
            raise BaseUrlMissingError()

        if "timeout" not in overrides and os.environ.get(ENV_TIMEOUT):
            overrides["timeout"] = float(os.environ[ENV_TIMEOUT])

        return cls(base_url=base_url, **overrides)
