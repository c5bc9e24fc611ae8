#
#
#

from requests import Session

from . import __version__ as package_version
from .exceptions import (
    BunnyClientException,
    BunnyClientNotFound,
    BunnyClientUnauthorized,
)


class BunnyClient(object):
    BASE_URL = 'https://api.bunny.net'

    def __init__(self, api_key, base_url=None, timeout=None):
        session = Session()
        session.headers.update(
            {
                'AccessKey': api_key,
                'Accept': 'application/json',
                'User-Agent': f'bunny-dns-zone/{package_version}',
            }
        )
        self._session = session
        self._base_url = (base_url or self.BASE_URL).rstrip('/')
        self._timeout = timeout

    def _do(self, method, path, params=None, data=None, timeout=None):
        url = f'{self._base_url}{path}'
        if timeout is None:
            timeout = self._timeout
        response = self._session.request(
            method, url, params=params, json=data, timeout=timeout
        )
        if response.status_code == 401:
            raise BunnyClientUnauthorized()
        if response.status_code == 404:
            raise BunnyClientNotFound()
        if response.status_code >= 400:
            raise BunnyClientException(self._error_message(response))
        return response

    def _error_message(self, response):
        msg = f'{response.status_code} {response.reason}'
        try:
            body = response.json()
        except ValueError:
            return msg
        # bunny reports validation problems as {ErrorKey, Field, Message}
        if isinstance(body, dict) and body.get('Message'):
            return f'{msg}: {body["Message"]}'
        return msg

    def _json(self, response):
        try:
            return response.json()
        except ValueError as e:
            raise BunnyClientException(
                f'invalid JSON in API response: {e}'
            ) from e

    def _do_json(self, method, path, params=None, data=None, timeout=None):
        return self._json(self._do(method, path, params, data, timeout))

    def dns_zone_create(self, domain, timeout=None):
        data = {'Domain': domain}
        return self._do_json('POST', '/dnszone', data=data, timeout=timeout)

    def dns_zone_get(self, zone_id, timeout=None):
        return self._do_json('GET', f'/dnszone/{zone_id}', timeout=timeout)

    def dns_zone_update(self, zone_id, data, timeout=None):
        response = self._do(
            'POST', f'/dnszone/{zone_id}', data=data, timeout=timeout
        )
        if response.status_code == 204 or not response.content:
            return self.dns_zone_get(zone_id, timeout=timeout)
        return self._json(response)

    def dns_zone_delete(self, zone_id, timeout=None):
        self._do('DELETE', f'/dnszone/{zone_id}', timeout=timeout)
