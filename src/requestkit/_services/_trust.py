import hmac
from logging import getLogger
from typing import Sequence

from ..models.security import (
    CancelChallenge,
    Challenge,
    ChallengeHandler,
    ClientIdentityChallenge,
    Disposition,
    PerformDefaultHandling,
    ServerTrustChallenge,
    TrustPolicy,
    UseCredential,
)

logger = getLogger("requestkit.trust")


def evaluate_server_trust(
    challenge: ServerTrustChallenge, pinned_certificates: Sequence[bytes]
) -> Disposition:
    """Match the server's leaf certificate against the pinned set.

    Chain evaluation against the platform store (or the configured anchors)
    has already succeeded by the time a challenge is raised; this only
    decides whether the evaluated leaf is one we pinned. Comparison is on
    the raw DER bytes.
    """
    leaf = challenge.leaf
    if leaf is None:
        # Inherited permissive default: no leaf to compare means trusted.
        logger.warning(
            f"No leaf certificate presented by {challenge.host}; accepting without pin check"
        )
        return UseCredential(None)

    if any(hmac.compare_digest(leaf, pinned) for pinned in pinned_certificates):
        return UseCredential(leaf)

    logger.warning(f"Leaf certificate for {challenge.host} matches no pinned certificate")
    return CancelChallenge()


def make_challenge_handler(policy: TrustPolicy) -> ChallengeHandler:
    def handle(challenge: Challenge) -> Disposition:
        if isinstance(challenge, ServerTrustChallenge):
            if not policy.pins:
                return PerformDefaultHandling()
            return evaluate_server_trust(challenge, policy.pinned_certificates)

        if isinstance(challenge, ClientIdentityChallenge):
            if policy.identity is None:
                return PerformDefaultHandling()
            return UseCredential(policy.identity)

        return PerformDefaultHandling()

    return handle
