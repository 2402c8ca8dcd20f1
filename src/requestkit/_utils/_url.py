from typing import Any, Iterable
from urllib.parse import quote, urlencode

from httpx import URL


def append_path_component(url: URL, component: str) -> URL:
    """Join ``component`` onto the path of ``url`` with a single slash.

    An empty component still appends the separator, so ``https://host`` joined
    with ``""`` becomes ``https://host/``.
    """
    base = url.path.rstrip("/")
    component = component.lstrip("/")
    return url.copy_with(path=f"{base}/{quote(component, safe='/')}")


def flatten_query(values: dict[str, Any]) -> list[tuple[str, str]]:
    """Keep only str, bool and int values; anything else is silently dropped."""
    pairs: list[tuple[str, str]] = []
    for key, value in values.items():
        if isinstance(value, bool):
            pairs.append((str(key), "true" if value else "false"))
        elif isinstance(value, (str, int)):
            pairs.append((str(key), str(value)))
    return pairs


def form_encode(pairs: Iterable[tuple[str, str]]) -> bytes:
    return urlencode(list(pairs)).encode("utf-8")
