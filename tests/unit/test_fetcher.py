import pytest
import requests
import urllib3

from keeper_lib.errors import ReadError, UpstreamError, ValidationError
from keeper_lib.proxy.fetcher import CharacterFetcher, validate_url
from tests.helpers import FakeClock, FakeResponse, FakeSession, connection_refused


@pytest.mark.parametrize('url', [
    'https://www.dndbeyond.com/characters/12345',
    'http://localhost:8000/sheet.json',
    'HTTPS://example.com',
])
def test_validate_url_accepts_absolute_http(url):
    assert validate_url(url) == url


def test_validate_url_missing():
    with pytest.raises(ValidationError, match='url parameter is required'):
        validate_url('')
    with pytest.raises(ValidationError, match='url parameter is required'):
        validate_url(None)


@pytest.mark.parametrize('url', ['not-a-url', '/relative/path', 'ftp://example.com/file', 'https://', 'http://[::1'])
def test_validate_url_rejects_malformed(url):
    with pytest.raises(ValidationError, match='invalid url format'):
        validate_url(url)


def test_fetch_relays_body_and_url():
    session = FakeSession(FakeResponse(b'{"name": "Gimli"}'))
    fetcher = CharacterFetcher(session=session, timeout=3)
    res = fetcher.fetch('https://example.com/c/1')
    assert res.url == 'https://example.com/c/1'
    assert res.content == '{"name": "Gimli"}'
    assert session.calls == [('https://example.com/c/1', {'timeout': 3, 'stream': True})]
    assert session.response.closed is True


def test_fetch_relays_upstream_error_pages():
    session = FakeSession(FakeResponse(b'Not Found', status_code=404))
    res = CharacterFetcher(session=session).fetch('https://example.com/missing')
    assert res.content == 'Not Found'


def test_fetch_replaces_undecodable_bytes():
    session = FakeSession(FakeResponse(b'caf\xe9'))
    assert CharacterFetcher(session=session).fetch('https://example.com').content == 'caf�'


def test_invalid_url_never_reaches_network():
    session = FakeSession()
    with pytest.raises(ValidationError):
        CharacterFetcher(session=session).fetch('not-a-url')
    assert session.calls == []


@pytest.mark.parametrize('error', [connection_refused(), requests.Timeout('read timed out')])
def test_network_failure_is_upstream_error(error):
    fetcher = CharacterFetcher(session=FakeSession(error=error))
    with pytest.raises(UpstreamError) as ei:
        fetcher.fetch('https://example.com')
    assert ei.value.status_code == 502


def test_body_read_failure_is_read_error():
    resp = FakeResponse(read_error=requests.exceptions.ChunkedEncodingError('broken chunk'))
    fetcher = CharacterFetcher(session=FakeSession(resp))
    with pytest.raises(ReadError) as ei:
        fetcher.fetch('https://example.com')
    assert ei.value.status_code == 500
    assert resp.closed is True


def test_default_timeout_is_bounded():
    fetcher = CharacterFetcher(session=FakeSession())
    assert 0 < fetcher.timeout <= 30


def test_close_closes_session():
    session = FakeSession()
    CharacterFetcher(session=session).close()
    assert session.closed is True


@pytest.mark.parametrize('error', [
    urllib3.exceptions.LocationParseError('http://' + 'a' * 70 + '.com/'),
    UnicodeError('encoding with \'idna\' codec failed (UnicodeError: label too long)'),
    requests.exceptions.InvalidURL('Failed to parse'),
])
def test_unparsable_host_is_upstream_error(error):
    fetcher = CharacterFetcher(session=FakeSession(error=error))
    with pytest.raises(UpstreamError) as ei:
        fetcher.fetch('http://' + 'a' * 70 + '.com/')
    assert ei.value.status_code == 502


def test_real_session_overlong_host_label_is_upstream_error():
    fetcher = CharacterFetcher(timeout=2)
    try:
        with pytest.raises(UpstreamError):
            fetcher.fetch('http://' + 'a' * 70 + '.com/')
    finally:
        fetcher.close()


def test_body_over_cap_is_read_error():
    resp = FakeResponse(chunks=[b'a' * 6, b'b' * 6])
    fetcher = CharacterFetcher(session=FakeSession(resp), max_bytes=10)
    with pytest.raises(ReadError, match='body exceeds 10 bytes'):
        fetcher.fetch('https://example.com')
    assert resp.closed is True


def test_body_at_cap_is_relayed():
    resp = FakeResponse(chunks=[b'a' * 5, b'b' * 5])
    fetcher = CharacterFetcher(session=FakeSession(resp), max_bytes=10)
    assert fetcher.fetch('https://example.com').content == 'aaaaabbbbb'


def test_slow_body_overruns_total_deadline():
    clock = FakeClock()
    resp = FakeResponse(chunks=[b'a', b'b', b'c'], on_chunk=lambda: clock.advance(4))
    fetcher = CharacterFetcher(session=FakeSession(resp), timeout=10, clock=clock)
    with pytest.raises(ReadError, match='timed out after 10s'):
        fetcher.fetch('https://example.com')
    assert resp.closed is True


def test_body_within_deadline_is_relayed():
    clock = FakeClock()
    resp = FakeResponse(chunks=[b'a', b'b'], on_chunk=lambda: clock.advance(4))
    fetcher = CharacterFetcher(session=FakeSession(resp), timeout=10, clock=clock)
    assert fetcher.fetch('https://example.com').content == 'ab'
