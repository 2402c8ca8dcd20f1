import ssl
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple, Union


@dataclass(frozen=True)
class ClientIdentity:
    """Client certificate and private key presented for mutual TLS."""

    certfile: Union[str, Path]
    keyfile: Optional[Union[str, Path]] = None
    password: Optional[str] = None


class CertificatesProvider(Protocol):
    @property
    def certificates(self) -> Sequence[bytes]: ...


class IdentityProvider(Protocol):
    @property
    def identity(self) -> Optional[ClientIdentity]: ...


@dataclass(frozen=True)
class PinnedCertificates:
    """Static certificates provider holding DER encoded certificates.

    ``anchors`` optionally restricts chain evaluation to the given roots.
    """

    certificates: Tuple[bytes, ...] = ()
    anchors: Tuple[bytes, ...] = ()

    @classmethod
    def from_pem_files(
        cls,
        paths: Iterable[Union[str, Path]],
        anchors: Iterable[Union[str, Path]] = (),
    ) -> "PinnedCertificates":
        return cls(
            certificates=tuple(_read_der(p) for p in paths),
            anchors=tuple(_read_der(p) for p in anchors),
        )


@dataclass(frozen=True)
class StaticIdentity:
    identity: Optional[ClientIdentity] = None


def _read_der(path: Union[str, Path]) -> bytes:
    data = Path(path).read_bytes()
    if b"-----BEGIN CERTIFICATE-----" in data:
        return ssl.PEM_cert_to_DER_cert(data.decode("ascii"))
    return data


@dataclass(frozen=True)
class TrustPolicy:
    """Pinned certificates and client identity applied to one transport session.

    A request built without a policy defers to the platform trust store.
    """

    pinned_certificates: Tuple[bytes, ...] = ()
    anchor_certificates: Tuple[bytes, ...] = ()
    identity: Optional[ClientIdentity] = None

    @property
    def pins(self) -> bool:
        return len(self.pinned_certificates) > 0


# Challenges raised by the transport while establishing a TLS session.


@dataclass(frozen=True)
class ServerTrustChallenge:
    host: Optional[str]
    # DER encoded certificates presented by the server, leaf first.
    certificate_chain: List[bytes] = field(default_factory=list)

    @property
    def leaf(self) -> Optional[bytes]:
        return self.certificate_chain[0] if self.certificate_chain else None


@dataclass(frozen=True)
class ClientIdentityChallenge:
    host: Optional[str]


@dataclass(frozen=True)
class OtherChallenge:
    host: Optional[str]
    kind: str


Challenge = Union[ServerTrustChallenge, ClientIdentityChallenge, OtherChallenge]


# Dispositions a challenge handler may answer with.


@dataclass(frozen=True)
class UseCredential:
    # ServerTrustChallenge: the accepted leaf; ClientIdentityChallenge: the identity.
    credential: Union[bytes, ClientIdentity, None]


@dataclass(frozen=True)
class CancelChallenge:
    pass


@dataclass(frozen=True)
class PerformDefaultHandling:
    pass


Disposition = Union[UseCredential, CancelChallenge, PerformDefaultHandling]

ChallengeHandler = Callable[[Challenge], Disposition]
