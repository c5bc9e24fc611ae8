#
#
#

from octodns.provider import ProviderException


class BunnyClientException(ProviderException):
    pass


class BunnyClientNotFound(BunnyClientException):
    def __init__(self):
        super().__init__('Not Found')


class BunnyClientUnauthorized(BunnyClientException):
    def __init__(self):
        super().__init__('Unauthorized')


class DnsZoneException(ProviderException):
    pass


class DnsZoneValidationError(DnsZoneException):
    '''Raised for desired-state input that cannot be translated.

    Never raised after a remote call has been made.
    '''

    def __init__(self, reasons):
        if isinstance(reasons, str):
            reasons = [reasons]
        self.reasons = reasons
        super().__init__(', '.join(reasons))


class UnsupportedValueError(DnsZoneValidationError):
    def __init__(self, what, value, valid):
        self.value = value
        self.valid = list(valid)
        super().__init__(
            f'unsupported {what}: {value!r}, valid values: '
            + ', '.join(str(v) for v in self.valid)
        )


class DnsZoneConversionError(DnsZoneException):
    pass


class DnsZoneOperationError(DnsZoneException):
    pass


class DnsZoneGone(DnsZoneException):
    def __init__(self, zone_id):
        self.zone_id = zone_id
        super().__init__(f'DNS zone {zone_id} no longer exists')


class DnsZoneCancelled(DnsZoneException):
    def __init__(self, msg='operation cancelled', zone_id=None):
        self.zone_id = zone_id
        super().__init__(msg)
