#
#
#

"""Structured records for the DNS zone resource.

Configuration documents are validated once, in ``DesiredState.from_config``;
everything past that boundary works on these records.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from octodns.idna import IdnaError, idna_encode

from .anonymization import (
    anonymization_type_from_int,
    anonymization_type_to_int,
)
from .exceptions import (
    DnsZoneConversionError,
    DnsZoneValidationError,
    UnsupportedValueError,
)

KEY_DOMAIN = 'domain'
KEY_CUSTOM_NAMESERVERS = 'custom_nameservers'
KEY_LOGGING = 'logging'


def _block(config, key, reasons):
    '''Unwraps an optional single-instance block.

    Accepts a mapping, or a list holding at most one mapping. Returns None
    for an absent or empty block.
    '''
    value = config.get(key)
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        if len(value) > 1:
            reasons.append(
                f'{key}: at most one block allowed, got {len(value)}'
            )
            return None
        if not value:
            return None
        value = value[0]
    if value is None:
        return None
    if not isinstance(value, Mapping):
        reasons.append(f'{key}: expected a mapping, got {type(value).__name__}')
        return None
    return value or None


def _unknown_keys(prefix, data, known, reasons):
    for key in sorted(set(data) - set(known)):
        reasons.append(f'{prefix}unknown field "{key}"')


@dataclass(frozen=True)
class CustomNameservers:
    soa_email: str = ''
    nameserver_1: str = ''
    nameserver_2: str = ''
    enabled: bool = True

    REQUIRED = ('soa_email', 'nameserver_1', 'nameserver_2')

    @classmethod
    def from_config(cls, data, reasons):
        _unknown_keys(
            f'{KEY_CUSTOM_NAMESERVERS}.',
            data,
            cls.REQUIRED + ('enabled',),
            reasons,
        )
        values = {}
        for key in cls.REQUIRED:
            value = data.get(key)
            if not isinstance(value, str) or not value.strip():
                reasons.append(f'{KEY_CUSTOM_NAMESERVERS}.{key} is required')
                continue
            values[key] = value
        if len(values) != len(cls.REQUIRED):
            return None
        return cls(**values)

    def to_dict(self):
        return {
            'enabled': self.enabled,
            'soa_email': self.soa_email,
            'nameserver_1': self.nameserver_1,
            'nameserver_2': self.nameserver_2,
        }


@dataclass(frozen=True)
class Logging:
    ip_anonymization: Optional[str] = None
    enabled: bool = True
    ip_anonymization_enabled: bool = False

    @classmethod
    def from_config(cls, data, reasons):
        _unknown_keys(
            f'{KEY_LOGGING}.',
            data,
            ('enabled', 'ip_anonymization', 'ip_anonymization_enabled'),
            reasons,
        )
        anonymization = data.get('ip_anonymization') or None
        if anonymization is not None:
            try:
                anonymization_type_to_int(anonymization)
            except UnsupportedValueError as e:
                reasons.append(f'{KEY_LOGGING}.ip_anonymization: {e}')
                return None
        return cls(
            ip_anonymization=anonymization,
            ip_anonymization_enabled=anonymization is not None,
        )

    def to_dict(self):
        return {
            'enabled': self.enabled,
            'ip_anonymization_enabled': self.ip_anonymization_enabled,
            'ip_anonymization': self.ip_anonymization,
        }


@dataclass(frozen=True)
class DesiredState:
    domain: str
    custom_nameservers: Optional[CustomNameservers] = None
    logging: Optional[Logging] = None

    # computed fields a caller may hand back unchanged
    COMPUTED = ('id', 'last_updated')

    @classmethod
    def from_config(cls, config):
        if isinstance(config, cls):
            return config
        if not isinstance(config, Mapping):
            raise DnsZoneValidationError(
                f'configuration must be a mapping, got {type(config).__name__}'
            )

        reasons = []
        _unknown_keys(
            '',
            config,
            (KEY_DOMAIN, KEY_CUSTOM_NAMESERVERS, KEY_LOGGING) + cls.COMPUTED,
            reasons,
        )

        domain = normalize_domain(config.get(KEY_DOMAIN), reasons)

        custom_nameservers = None
        data = _block(config, KEY_CUSTOM_NAMESERVERS, reasons)
        if data is not None:
            custom_nameservers = CustomNameservers.from_config(data, reasons)

        logging = None
        data = _block(config, KEY_LOGGING, reasons)
        if data is not None:
            logging = Logging.from_config(data, reasons)

        if reasons:
            raise DnsZoneValidationError(reasons)

        return cls(
            domain=domain,
            custom_nameservers=custom_nameservers,
            logging=logging,
        )


def normalize_domain(value, reasons):
    if not isinstance(value, str) or not value.strip():
        reasons.append(f'{KEY_DOMAIN} is required')
        return None
    value = value.strip()
    if value.endswith('.'):
        value = value[:-1]
    try:
        return idna_encode(value)
    except IdnaError as e:
        reasons.append(f'{KEY_DOMAIN}: invalid domain {value!r}: {e}')
        return None


@dataclass(frozen=True)
class DnsZone:
    '''A DNS zone as the bunny.net API reports it.'''

    id: int
    domain: str
    custom_nameservers_enabled: bool = False
    nameserver_1: Optional[str] = None
    nameserver_2: Optional[str] = None
    soa_email: Optional[str] = None
    logging_enabled: bool = False
    logging_ip_anonymization_enabled: bool = False
    log_anonymization_type: int = 0

    @classmethod
    def from_api(cls, data):
        try:
            return cls(
                id=int(data['Id']),
                domain=data['Domain'],
                custom_nameservers_enabled=bool(
                    data.get('CustomNameserversEnabled', False)
                ),
                nameserver_1=data.get('Nameserver1'),
                nameserver_2=data.get('Nameserver2'),
                soa_email=data.get('SoaEmail'),
                logging_enabled=bool(data.get('LoggingEnabled', False)),
                logging_ip_anonymization_enabled=bool(
                    data.get('LoggingIPAnonymizationEnabled', False)
                ),
                log_anonymization_type=int(
                    data.get('LogAnonymizationType') or 0
                ),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DnsZoneConversionError(
                f'malformed DNS zone in API response: {e!r}'
            ) from e


@dataclass(frozen=True)
class CachedState:
    id: str
    domain: str
    custom_nameservers: CustomNameservers
    logging: Logging
    last_updated: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_zone(cls, zone, last_updated=None):
        try:
            anonymization = anonymization_type_from_int(
                zone.log_anonymization_type
            )
        except UnsupportedValueError as e:
            raise DnsZoneConversionError(
                f'converting DNS zone {zone.id} failed: {e}'
            ) from e

        return cls(
            id=str(zone.id),
            domain=zone.domain,
            custom_nameservers=CustomNameservers(
                enabled=zone.custom_nameservers_enabled,
                soa_email=zone.soa_email or '',
                nameserver_1=zone.nameserver_1 or '',
                nameserver_2=zone.nameserver_2 or '',
            ),
            logging=Logging(
                enabled=zone.logging_enabled,
                ip_anonymization_enabled=zone.logging_ip_anonymization_enabled,
                ip_anonymization=anonymization,
            ),
            last_updated=last_updated,
        )

    @classmethod
    def placeholder(cls, zone_id, domain, last_updated=None):
        '''State for a zone known only by id and domain.'''
        return cls(
            id=str(zone_id),
            domain=domain,
            custom_nameservers=CustomNameservers(enabled=False),
            logging=Logging(enabled=False),
            last_updated=last_updated,
        )

    def stamped(self, last_updated):
        return replace(self, last_updated=last_updated)

    def to_dict(self):
        return {
            'id': self.id,
            KEY_DOMAIN: self.domain,
            KEY_CUSTOM_NAMESERVERS: [self.custom_nameservers.to_dict()],
            KEY_LOGGING: [self.logging.to_dict()],
            'last_updated': self.last_updated,
        }


@dataclass(frozen=True)
class ZoneUpdate:
    '''Payload of the DNS zone update call; None fields are left unset.'''

    custom_nameservers_enabled: bool = False
    nameserver_1: Optional[str] = None
    nameserver_2: Optional[str] = None
    soa_email: Optional[str] = None
    logging_enabled: bool = False
    logging_ip_anonymization_enabled: bool = False
    log_anonymization_type: Optional[int] = None

    API_KEYS = {
        'custom_nameservers_enabled': 'CustomNameserversEnabled',
        'nameserver_1': 'Nameserver1',
        'nameserver_2': 'Nameserver2',
        'soa_email': 'SoaEmail',
        'logging_enabled': 'LoggingEnabled',
        'logging_ip_anonymization_enabled': 'LoggingIPAnonymizationEnabled',
        'log_anonymization_type': 'LogAnonymizationType',
    }

    @classmethod
    def from_desired(cls, desired):
        values = {}

        custom_nameservers = desired.custom_nameservers
        if custom_nameservers is not None:
            values.update(
                custom_nameservers_enabled=True,
                nameserver_1=custom_nameservers.nameserver_1,
                nameserver_2=custom_nameservers.nameserver_2,
                soa_email=custom_nameservers.soa_email,
            )

        logging = desired.logging
        if logging is not None:
            values['logging_enabled'] = True
            try:
                code = anonymization_type_to_int(logging.ip_anonymization)
            except UnsupportedValueError:
                # unknown or missing type only turns anonymization off
                pass
            else:
                values.update(
                    logging_ip_anonymization_enabled=True,
                    log_anonymization_type=code,
                )

        return cls(**values)

    @classmethod
    def from_cached(cls, cached):
        '''The payload that would reproduce ``cached`` remotely.'''
        values = {}

        custom_nameservers = cached.custom_nameservers
        if custom_nameservers.enabled:
            values.update(
                custom_nameservers_enabled=True,
                nameserver_1=custom_nameservers.nameserver_1,
                nameserver_2=custom_nameservers.nameserver_2,
                soa_email=custom_nameservers.soa_email,
            )

        logging = cached.logging
        if logging.enabled:
            values['logging_enabled'] = True
            if logging.ip_anonymization_enabled:
                values.update(
                    logging_ip_anonymization_enabled=True,
                    log_anonymization_type=anonymization_type_to_int(
                        logging.ip_anonymization
                    ),
                )

        return cls(**values)

    def to_api(self) -> Dict:
        ret = {}
        for attr, key in self.API_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                ret[key] = value
        return ret

    def diff(self, other) -> List[str]:
        return [
            attr
            for attr in self.API_KEYS
            if getattr(self, attr) != getattr(other, attr)
        ]
