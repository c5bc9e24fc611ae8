#
# Tests for the requests based bunny.net DNS zone client
#

from unittest import TestCase
from unittest.mock import Mock

from bunny_dns_zone import __version__
from bunny_dns_zone.dnszone_client import BunnyClient
from bunny_dns_zone.exceptions import (
    BunnyClientException,
    BunnyClientNotFound,
    BunnyClientUnauthorized,
)

ZONE = {'Id': 42, 'Domain': 'example.com'}


def _response(status_code=200, body=None, reason='OK'):
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    if body is None:
        response.content = b''
        response.json.side_effect = ValueError('no body')
    else:
        response.content = b'{}'
        response.json.return_value = body
    return response


class TestBunnyClient(TestCase):
    def _client(self, *responses, **kwargs):
        client = BunnyClient('secret', **kwargs)
        client._session = Mock()
        client._session.request.side_effect = list(responses)
        return client

    def test_session_headers(self):
        client = BunnyClient('secret')
        headers = client._session.headers
        self.assertEqual('secret', headers['AccessKey'])
        self.assertEqual('application/json', headers['Accept'])
        self.assertEqual(f'bunny-dns-zone/{__version__}', headers['User-Agent'])

    def test_create(self):
        client = self._client(_response(201, ZONE))
        self.assertEqual(ZONE, client.dns_zone_create('example.com', timeout=5))
        client._session.request.assert_called_once_with(
            'POST',
            'https://api.bunny.net/dnszone',
            params=None,
            json={'Domain': 'example.com'},
            timeout=5,
        )

    def test_get_uses_base_url_and_default_timeout(self):
        client = self._client(
            _response(200, ZONE), base_url='http://localhost:8080/', timeout=10
        )
        self.assertEqual(ZONE, client.dns_zone_get(42))
        client._session.request.assert_called_once_with(
            'GET',
            'http://localhost:8080/dnszone/42',
            params=None,
            json=None,
            timeout=10,
        )

    def test_update_returns_body(self):
        client = self._client(_response(200, ZONE))
        self.assertEqual(
            ZONE, client.dns_zone_update(42, {'LoggingEnabled': True})
        )
        client._session.request.assert_called_once_with(
            'POST',
            'https://api.bunny.net/dnszone/42',
            params=None,
            json={'LoggingEnabled': True},
            timeout=None,
        )

    def test_update_without_body_reads_back(self):
        client = self._client(_response(204), _response(200, ZONE))
        self.assertEqual(
            ZONE, client.dns_zone_update(42, {'LoggingEnabled': True})
        )
        self.assertEqual(2, client._session.request.call_count)
        method, url = client._session.request.call_args[0]
        self.assertEqual('GET', method)
        self.assertEqual('https://api.bunny.net/dnszone/42', url)

    def test_delete(self):
        client = self._client(_response(204))
        self.assertIsNone(client.dns_zone_delete(42))
        client._session.request.assert_called_once_with(
            'DELETE',
            'https://api.bunny.net/dnszone/42',
            params=None,
            json=None,
            timeout=None,
        )

    def test_unauthorized(self):
        client = self._client(_response(401, reason='Unauthorized'))
        with self.assertRaises(BunnyClientUnauthorized) as ctx:
            client.dns_zone_get(42)
        self.assertEqual('Unauthorized', str(ctx.exception))

    def test_not_found(self):
        client = self._client(_response(404, reason='Not Found'))
        with self.assertRaises(BunnyClientNotFound):
            client.dns_zone_delete(42)

    def test_error_message_from_body(self):
        client = self._client(
            _response(
                400,
                {
                    'ErrorKey': 'validation_error',
                    'Field': 'Domain',
                    'Message': 'The domain is already registered',
                },
                reason='Bad Request',
            )
        )
        with self.assertRaises(BunnyClientException) as ctx:
            client.dns_zone_create('example.com')
        self.assertEqual(
            '400 Bad Request: The domain is already registered',
            str(ctx.exception),
        )

    def test_invalid_json_body(self):
        for call in (
            lambda c: c.dns_zone_get(42),
            lambda c: c.dns_zone_create('example.com'),
            lambda c: c.dns_zone_update(42, {'LoggingEnabled': True}),
        ):
            response = _response(200)
            response.content = b'<html>maintenance</html>'
            client = self._client(response)
            with self.assertRaises(BunnyClientException) as ctx:
                call(client)
            self.assertIn('invalid JSON in API response', str(ctx.exception))

    def test_error_without_body(self):
        client = self._client(_response(502, reason='Bad Gateway'))
        with self.assertRaises(BunnyClientException) as ctx:
            client.dns_zone_get(42)
        self.assertEqual('502 Bad Gateway', str(ctx.exception))
        self.assertNotIsInstance(ctx.exception, BunnyClientNotFound)
