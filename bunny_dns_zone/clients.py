#
#
#

"""Protocol definition for the bunny.net DNS zone API client.

Allows the reconciler to be driven by any structurally compatible client,
the fake backends in the test-suite included.
"""

from typing import Dict, Optional, Protocol


class DnsZoneClient(Protocol):
    """Protocol defining the expected interface for DNS zone clients.

    Every method raises BunnyClientNotFound when the zone does not exist and
    BunnyClientException for any other API failure.
    """

    def dns_zone_create(
        self, domain: str, timeout: Optional[float] = None
    ) -> Dict:
        """Create a DNS zone.

        Args:
            domain: Zone domain (without trailing dot)
            timeout: Optional request timeout in seconds

        Returns:
            Zone dict as returned by the API, including 'Id'
        """
        ...

    def dns_zone_get(self, zone_id: int, timeout: Optional[float] = None) -> Dict:
        """Get a DNS zone by id.

        Args:
            zone_id: Zone identifier
            timeout: Optional request timeout in seconds

        Returns:
            Zone dict as returned by the API
        """
        ...

    def dns_zone_update(
        self, zone_id: int, data: Dict, timeout: Optional[float] = None
    ) -> Dict:
        """Update the settable attributes of a DNS zone.

        Args:
            zone_id: Zone identifier
            data: Update payload, keyed by API field name
            timeout: Optional request timeout in seconds

        Returns:
            The updated zone dict
        """
        ...

    def dns_zone_delete(
        self, zone_id: int, timeout: Optional[float] = None
    ) -> None:
        """Delete a DNS zone.

        Args:
            zone_id: Zone identifier
            timeout: Optional request timeout in seconds
        """
        ...
