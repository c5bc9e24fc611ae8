#
#
#

from enum import IntEnum

from .exceptions import UnsupportedValueError


class LogAnonymizationType(IntEnum):
    remove_octet = 0
    drop_ip = 1


ANONYMIZATION_TYPE_NAMES = sorted(t.name for t in LogAnonymizationType)


def anonymization_type_to_int(name):
    try:
        return int(LogAnonymizationType[name])
    except (KeyError, TypeError):
        raise UnsupportedValueError(
            'IP anonymization type', name, ANONYMIZATION_TYPE_NAMES
        ) from None


def anonymization_type_from_int(code):
    try:
        return LogAnonymizationType(code).name
    except ValueError:
        raise UnsupportedValueError(
            'IP anonymization type code',
            code,
            [int(t) for t in LogAnonymizationType],
        ) from None
