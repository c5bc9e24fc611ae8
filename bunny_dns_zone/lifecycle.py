#
#
#

"""Reconciliation bookkeeping: create phases, diagnostics, plans and
cancellation.
"""

import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .exceptions import DnsZoneCancelled


class CreatePhase(Enum):
    '''States of the two-step create.

    The create call only accepts the domain, so a zone is created first and
    then enriched with an update. ``READY`` and ``PARTIALLY_CREATED`` are
    terminal; in both the zone exists remotely.
    '''

    CREATING = 'creating'
    ENRICHING = 'enriching'
    READY = 'ready'
    PARTIALLY_CREATED = 'partially_created'


SEVERITY_WARNING = 'warning'
SEVERITY_ERROR = 'error'


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    summary: str
    detail: str = ''


@dataclass
class CreateResult:
    id: str
    state: object
    phase: CreatePhase
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def partial(self):
        return self.phase == CreatePhase.PARTIALLY_CREATED


class PlanAction(Enum):
    NOOP = 'noop'
    CREATE = 'create'
    UPDATE = 'update'
    REPLACE = 'replace'


@dataclass(frozen=True)
class Plan:
    action: PlanAction
    changes: List[str] = field(default_factory=list)

    @property
    def has_changes(self):
        return self.action != PlanAction.NOOP


class CancelContext(object):
    '''Cancellation and deadline for one reconciliation operation.

    ``cancel`` may be called from another thread, e.g. a signal handler in
    the host; everything else runs on the operation's thread.
    '''

    def __init__(self, timeout=None, clock=time.monotonic):
        self._clock = clock
        self._deadline = None if timeout is None else clock() + timeout
        self._cancelled = threading.Event()

    def cancel(self):
        self._cancelled.set()

    @property
    def expired(self):
        return self._deadline is not None and self._clock() >= self._deadline

    @property
    def cancelled(self):
        return self._cancelled.is_set() or self.expired

    def remaining(self) -> Optional[float]:
        if self._deadline is None:
            return None
        return max(self._deadline - self._clock(), 0.0)

    def check(self, zone_id=None):
        if self._cancelled.is_set():
            raise DnsZoneCancelled(zone_id=zone_id)
        if self.expired:
            raise DnsZoneCancelled('deadline exceeded', zone_id=zone_id)
