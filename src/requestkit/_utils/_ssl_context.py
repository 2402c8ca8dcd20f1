import os
import ssl
from typing import Iterable, Optional

from .constants import ENV_REQUESTS_CA_BUNDLE, ENV_SSL_CERT_DIR, ENV_SSL_CERT_FILE


def expand_path(path: Optional[str]) -> Optional[str]:
    if not path:
        return path
    return os.path.expanduser(os.path.expandvars(path))


def create_ssl_context() -> ssl.SSLContext:
    """Context backed by the platform trust store.

    Uses the operating system store through truststore when it is installed,
    otherwise the certifi bundle unless ``SSL_CERT_FILE``, ``REQUESTS_CA_BUNDLE``
    or ``SSL_CERT_DIR`` point elsewhere.
    """
    try:
        import truststore
    except ImportError:
        import certifi

        ssl_cert_file = expand_path(os.environ.get(ENV_SSL_CERT_FILE))
        requests_ca_bundle = expand_path(os.environ.get(ENV_REQUESTS_CA_BUNDLE))
        ssl_cert_dir = expand_path(os.environ.get(ENV_SSL_CERT_DIR))

        return ssl.create_default_context(
            cafile=ssl_cert_file or requests_ca_bundle or certifi.where(),
            capath=ssl_cert_dir,
        )

    return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)


def create_anchored_ssl_context(anchor_certificates: Iterable[bytes]) -> ssl.SSLContext:
    """Build a context that trusts only the given DER encoded root certificates.

    Chain evaluation still happens during the handshake, but against the
    supplied anchors instead of the platform store.
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = True
    context.verify_mode = ssl.CERT_REQUIRED
    for der in anchor_certificates:
        context.load_verify_locations(cadata=der)
    return context


def get_ssl_context(
    anchor_certificates: Optional[Iterable[bytes]] = None,
) -> ssl.SSLContext:
    anchors = list(anchor_certificates or [])
    if anchors:
        return create_anchored_ssl_context(anchors)
    return create_ssl_context()


def get_httpx_client_kwargs(
    ssl_context: Optional[ssl.SSLContext] = None,
    timeout: Optional[float] = None,
    follow_redirects: bool = False,
) -> dict:
    """Keyword arguments shared by every httpx client the transport creates."""
    kwargs: dict = {
        "verify": ssl_context if ssl_context is not None else create_ssl_context(),
        "follow_redirects": follow_redirects,
    }
    if timeout is not None:
        kwargs["timeout"] = timeout
    return kwargs
