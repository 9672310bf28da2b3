"""Allowed status transitions for movement documents.

Each document kind has an explicit allow-list. `done` and `canceled` are
terminal: nothing leaves them.
"""

from common.choices import DocumentStatus as S
from common.exceptions import InvalidStateError

OPEN_RECEIPT = (S.DRAFT, S.WAITING, S.READY)
OPEN_DELIVERY = (S.DRAFT, S.WAITING, S.PICKING, S.PACKING, S.READY)

TRANSITIONS = {
    "receipt": {
        S.DRAFT: {S.WAITING, S.READY, S.DONE, S.CANCELED},
        S.WAITING: {S.READY, S.DONE, S.CANCELED},
        S.READY: {S.DONE, S.CANCELED},
    },
    "delivery": {
        S.DRAFT: {S.WAITING, S.PICKING, S.DONE, S.CANCELED},
        S.WAITING: {S.PICKING, S.DONE, S.CANCELED},
        S.PICKING: {S.PICKING, S.PACKING, S.DONE, S.CANCELED},
        S.PACKING: {S.PACKING, S.READY, S.DONE, S.CANCELED},
        S.READY: {S.DONE, S.CANCELED},
    },
    "transfer": {
        S.DRAFT: {S.WAITING, S.READY, S.DONE, S.CANCELED},
        S.WAITING: {S.READY, S.DONE, S.CANCELED},
        S.READY: {S.DONE, S.CANCELED},
    },
    "adjustment": {
        S.DRAFT: {S.DONE, S.CANCELED},
    },
}

COMPLETED_VERB = {"transfer": "executed"}


def can_transition(kind: str, current: str, target: str) -> bool:
    return target in TRANSITIONS[kind].get(current, set())


def ensure_open(kind: str, current: str) -> None:
    """Raise InvalidStateError if the document is done or canceled."""
    if current == S.DONE:
        raise InvalidStateError(f"{kind.capitalize()} already {COMPLETED_VERB.get(kind, 'validated')}")
    if current == S.CANCELED:
        raise InvalidStateError(f"{kind.capitalize()} is canceled")


def check_transition(kind: str, current: str, target: str) -> None:
    ensure_open(kind, current)
    if not can_transition(kind, current, target):
        raise InvalidStateError(f"Cannot move {kind} from {current} to {target}")


def ensure_editable(kind: str, current: str) -> None:
    ensure_open(kind, current)
    if current != S.DRAFT:
        raise InvalidStateError(f"Only draft {kind}s can be modified")


# EOF
