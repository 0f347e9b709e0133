"""Status transition tables for deployments and domain verification.

Every status change on a Deployment or a Domain's verification status is
checked here, so the allowed moves live in one place:

    deployment:    queued -> in_progress | canceled
                   in_progress -> success | failed | canceled
                   success, failed, canceled are terminal

    verification:  pending -> verified | failed
                   verified | failed -> pending   (re-verification)
"""
from typing import Dict, FrozenSet

from landingpad.constants import DeploymentStatus, VerificationStatus
from landingpad.utils.exceptions import InvalidTransitionError

DEPLOYMENT = "Deployment"
DOMAIN_VERIFICATION = "Domain verification"

DEPLOYMENT_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    DeploymentStatus.QUEUED: frozenset({DeploymentStatus.IN_PROGRESS, DeploymentStatus.CANCELED}),
    DeploymentStatus.IN_PROGRESS: frozenset({
        DeploymentStatus.SUCCESS,
        DeploymentStatus.FAILED,
        DeploymentStatus.CANCELED,
    }),
    DeploymentStatus.SUCCESS: frozenset(),
    DeploymentStatus.FAILED: frozenset(),
    DeploymentStatus.CANCELED: frozenset(),
}

VERIFICATION_TRANSITIONS: Dict[str, FrozenSet[str]] = {
    VerificationStatus.PENDING: frozenset({VerificationStatus.VERIFIED, VerificationStatus.FAILED}),
    VerificationStatus.VERIFIED: frozenset({VerificationStatus.PENDING}),
    VerificationStatus.FAILED: frozenset({VerificationStatus.PENDING}),
}

_TABLES = {
    DEPLOYMENT: DEPLOYMENT_TRANSITIONS,
    DOMAIN_VERIFICATION: VERIFICATION_TRANSITIONS,
}


def can_transition(entity: str, current: str, target: str) -> bool:
    """Return True if ``entity`` may move from ``current`` to ``target``."""
    return target in _TABLES[entity].get(current, frozenset())


def validate_transition(entity: str, current: str, target: str) -> None:
    """
    Check a status change against the entity's transition table.

    Args:
        entity: DEPLOYMENT or DOMAIN_VERIFICATION
        current: The stored status
        target: The requested status

    Raises:
        InvalidTransitionError: If the move is not in the table
    """
    if not can_transition(entity, current, target):
        raise InvalidTransitionError(entity, current, target)


def is_terminal_deployment_status(status: str) -> bool:
    return not DEPLOYMENT_TRANSITIONS.get(status)
