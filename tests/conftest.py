import sys
from pathlib import Path
from typing import Any, Callable, Generator

import pytest

# Ensure local source package (src/requestkit) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from requestkit import (  # noqa: E402
    RequestBuilder,
    RequestBuilderConfiguration,
    SerialDeliveryQueue,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("REQUESTKIT_BASE_URL", raising=False)
    monkeypatch.delenv("REQUESTKIT_TIMEOUT", raising=False)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def base_url() -> str:
    return "https://example.test"


@pytest.fixture
def delivery() -> Generator[SerialDeliveryQueue, None, None]:
    queue = SerialDeliveryQueue(name="test-delivery")
    yield queue
    queue.shutdown()


@pytest.fixture
def make_builder(
    base_url: str, delivery: SerialDeliveryQueue
) -> Callable[..., RequestBuilder]:
    def factory(**overrides: Any) -> RequestBuilder:
        overrides.setdefault("delivery_context", delivery)
        return RequestBuilder(
            RequestBuilderConfiguration(base_url=base_url, **overrides)
        )

    return factory


@pytest.fixture
def builder(make_builder: Callable[..., RequestBuilder]) -> RequestBuilder:
    return make_builder()
