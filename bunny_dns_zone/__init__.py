#
#
#

import logging
import os
import re
from datetime import datetime, timezone

from requests.exceptions import RequestException, Timeout

from .anonymization import ANONYMIZATION_TYPE_NAMES, LogAnonymizationType
from .clients import DnsZoneClient
from .exceptions import (
    BunnyClientException,
    BunnyClientNotFound,
    BunnyClientUnauthorized,
    DnsZoneCancelled,
    DnsZoneConversionError,
    DnsZoneGone,
    DnsZoneOperationError,
    DnsZoneValidationError,
    UnsupportedValueError,
)
from .lifecycle import (
    SEVERITY_WARNING,
    CancelContext,
    CreatePhase,
    CreateResult,
    Diagnostic,
    Plan,
    PlanAction,
)
from .models import CachedState, DesiredState, DnsZone, ZoneUpdate

__version__ = '0.1.0'

__all__ = [
    'ANONYMIZATION_TYPE_NAMES',
    'BunnyClientException',
    'BunnyClientNotFound',
    'BunnyClientUnauthorized',
    'CachedState',
    'CancelContext',
    'CreatePhase',
    'CreateResult',
    'DesiredState',
    'DnsZoneCancelled',
    'DnsZoneConversionError',
    'DnsZoneGone',
    'DnsZoneOperationError',
    'DnsZoneResource',
    'DnsZoneValidationError',
    'LogAnonymizationType',
    'Plan',
    'PlanAction',
    'UnsupportedValueError',
]

API_KEY_ENV = 'BUNNY_API_KEY'

# 64-bit signed, the range of zone ids on the wire
_ID_MAX = 2**63 - 1
_ID_RE = re.compile(r'-?[0-9]+')


def _timestamp():
    # RFC 850, e.g. "Monday, 19-Oct-26 10:21:00 UTC"
    return datetime.now(timezone.utc).strftime('%A, %d-%b-%y %H:%M:%S UTC')


def parse_zone_id(zone_id):
    '''Returns the integer form of a zone id given as a decimal string.'''
    if isinstance(zone_id, str) and _ID_RE.fullmatch(zone_id.strip()):
        value = int(zone_id.strip())
        if -_ID_MAX - 1 <= value <= _ID_MAX:
            return value
    raise DnsZoneValidationError(
        f'invalid DNS zone id {zone_id!r}: expected a decimal 64-bit integer'
    )


class DnsZoneResource(object):
    '''Lifecycle handlers for a bunny.net DNS zone.

    The host calls at most one operation at a time per zone; nothing here is
    locked. Every remote call is preceded by a cancellation check and bounded
    by the context's remaining time.
    '''

    def __init__(self, id, api_key=None, **kwargs):
        self.log = logging.getLogger(f'BunnyDnsZone[{id}]')
        base_url = kwargs.pop('base_url', None)
        timeout = kwargs.pop('timeout', None)
        self.log.debug(
            '__init__: id=%s, api_key=***, base_url=%s, timeout=%s',
            id,
            base_url,
            timeout,
        )
        if kwargs:
            raise TypeError(
                f'unexpected arguments: {", ".join(sorted(kwargs))}'
            )
        self.id = id

        if api_key is None:
            api_key = os.environ.get(API_KEY_ENV)
        if not api_key:
            raise ValueError(
                f'api_key is required, pass it explicitly or set {API_KEY_ENV}'
            )

        self._client = self._create_client(api_key, base_url, timeout)

    def _create_client(self, api_key, base_url, timeout) -> DnsZoneClient:
        from .dnszone_client import BunnyClient

        return BunnyClient(api_key, base_url=base_url, timeout=timeout)

    def _call(self, ctx, zone_id, method, *args):
        ctx.check(zone_id)
        try:
            return method(*args, timeout=ctx.remaining())
        except Timeout as e:
            raise DnsZoneCancelled(
                'deadline exceeded waiting for the API', zone_id=zone_id
            ) from e
        except RequestException as e:
            raise BunnyClientException(f'request failed: {e}') from e

    def _update_payload(self, desired):
        payload = ZoneUpdate.from_desired(desired)
        block = desired.logging
        if (
            block is not None
            and block.ip_anonymization is not None
            and not payload.logging_ip_anonymization_enabled
        ):
            self.log.warning(
                '_update_payload: unsupported IP anonymization type %r, '
                'disabling IP anonymization',
                block.ip_anonymization,
            )
        return payload

    def create(self, desired, ctx=None):
        desired = DesiredState.from_config(desired)
        ctx = ctx or CancelContext()
        self.log.debug('create: domain=%s', desired.domain)

        phase = CreatePhase.CREATING
        self.log.debug('create: phase=%s', phase.value)
        try:
            data = self._call(
                ctx, None, self._client.dns_zone_create, desired.domain
            )
            zone = DnsZone.from_api(data)
        except (BunnyClientException, DnsZoneConversionError) as e:
            raise DnsZoneOperationError(f'creating DNS zone failed: {e}') from e

        zone_id = str(zone.id)
        last_updated = _timestamp()
        self.log.info(
            'create: created DNS zone %s for %s', zone_id, desired.domain
        )

        phase = CreatePhase.ENRICHING
        self.log.debug('create: phase=%s, id=%s', phase.value, zone_id)
        try:
            state = self.update(zone_id, desired, ctx)
        except DnsZoneCancelled as e:
            e.zone_id = zone_id
            raise
        except (DnsZoneOperationError, DnsZoneConversionError) as e:
            return self._partially_created(zone, desired, last_updated, e)

        return CreateResult(
            id=zone_id,
            state=state,
            phase=CreatePhase.READY,
        )

    def _partially_created(self, zone, desired, last_updated, error):
        zone_id = str(zone.id)
        self.log.warning(
            'create: DNS zone %s exists but setting its attributes failed: %s',
            zone_id,
            error,
        )
        diagnostics = [
            Diagnostic(
                SEVERITY_WARNING,
                'setting DNS zone attributes via update failed',
                str(error),
            )
        ]
        try:
            state = CachedState.from_zone(zone, last_updated=last_updated)
        except DnsZoneConversionError as e:
            diagnostics.append(
                Diagnostic(
                    SEVERITY_WARNING,
                    'converting API response to resource state failed',
                    str(e),
                )
            )
            state = CachedState.placeholder(
                zone_id, zone.domain or desired.domain, last_updated
            )

        return CreateResult(
            id=zone_id,
            state=state,
            phase=CreatePhase.PARTIALLY_CREATED,
            diagnostics=diagnostics,
        )

    def read(self, zone_id, ctx=None, last_updated=None):
        ctx = ctx or CancelContext()
        _id = parse_zone_id(zone_id)
        self.log.debug('read: id=%s', zone_id)
        try:
            data = self._call(ctx, zone_id, self._client.dns_zone_get, _id)
        except BunnyClientNotFound:
            self.log.info('read: DNS zone %s is gone', zone_id)
            raise DnsZoneGone(zone_id) from None
        except BunnyClientException as e:
            raise DnsZoneOperationError(
                f'could not retrieve DNS zone {zone_id}: {e}'
            ) from e

        return CachedState.from_zone(
            DnsZone.from_api(data), last_updated=last_updated
        )

    def update(self, zone_id, desired, ctx=None):
        desired = DesiredState.from_config(desired)
        ctx = ctx or CancelContext()
        _id = parse_zone_id(zone_id)
        payload = self._update_payload(desired)
        self.log.debug('update: id=%s, payload=%s', zone_id, payload)

        try:
            data = self._call(
                ctx,
                zone_id,
                self._client.dns_zone_update,
                _id,
                payload.to_api(),
            )
        except BunnyClientException as e:
            raise DnsZoneOperationError(
                f'updating DNS zone {zone_id} via API failed: {e}'
            ) from e

        zone = DnsZone.from_api(data)
        if zone.domain != desired.domain:
            self.log.warning(
                'update: domain of DNS zone %s is %s, cannot change it to %s '
                'in place',
                zone_id,
                zone.domain,
                desired.domain,
            )
        state = CachedState.from_zone(zone)
        return state.stamped(_timestamp())

    def delete(self, zone_id, ctx=None):
        ctx = ctx or CancelContext()
        _id = parse_zone_id(zone_id)
        self.log.debug('delete: id=%s', zone_id)
        try:
            self._call(ctx, zone_id, self._client.dns_zone_delete, _id)
        except BunnyClientNotFound:
            self.log.debug('delete:   DNS zone %s already gone', zone_id)
            return
        except BunnyClientException as e:
            raise DnsZoneOperationError(
                f'could not delete DNS zone {zone_id}: {e}'
            ) from e
        self.log.info('delete: deleted DNS zone %s', zone_id)

    def import_state(self, external_id):
        parse_zone_id(external_id)
        self.log.debug('import_state: id=%s', external_id)
        return external_id

    def plan(self, desired, cached=None):
        desired = DesiredState.from_config(desired)
        if cached is None:
            return Plan(PlanAction.CREATE)
        if desired.domain != cached.domain:
            return Plan(PlanAction.REPLACE, ['domain'])
        # an omitted block compares equal to a disabled one
        changes = ZoneUpdate.from_desired(desired).diff(
            ZoneUpdate.from_cached(cached)
        )
        if changes:
            return Plan(PlanAction.UPDATE, changes)
        return Plan(PlanAction.NOOP)
