import logging

import cachecontrol
import pytest
import requests

from halnavigator.halnav import HALNavigator
from halnavigator.httpclient import (HttpClient, LoggingHttpClient,
                                     RequestsHttpClient)

ROOT = 'http://example.com'


def test_http_client_is_abstract():
    with pytest.raises(TypeError):
        HttpClient()


def test_requests_client_defaults():
    client = RequestsHttpClient()
    assert isinstance(client.session, requests.Session)
    assert not isinstance(client.session.get_adapter(ROOT),
                          cachecontrol.CacheControlAdapter)


def test_requests_client_auth_and_session():
    session = requests.Session()
    client = RequestsHttpClient(session=session, auth=('user', 'pw'))
    assert client.session is session
    assert session.auth == ('user', 'pw')


def test_requests_client_cache():
    client = RequestsHttpClient(cache=True)
    assert isinstance(client.session.get_adapter(ROOT),
                      cachecontrol.CacheControlAdapter)
    assert isinstance(client.session.get_adapter('https://example.com'),
                      cachecontrol.CacheControlAdapter)


def test_requests_client_cache_adapter():
    adapter = cachecontrol.CacheControlAdapter()
    client = RequestsHttpClient(cache=adapter)
    assert client.session.get_adapter(ROOT) is adapter


def test_navigator_builds_requests_client():
    session = requests.Session()
    nav = HALNavigator(ROOT, session=session, cache=True)
    assert nav.client.session is session
    assert nav.follow('a').client is nav.client


class TestRequestsClient:

    @pytest.fixture
    def client(self, api):
        api.register('/2nd', '', method='POST', status=204)
        return RequestsHttpClient()

    def test_do(self, client, api):
        res = client.do(requests.Request('GET', ROOT + '/3rd',
                                         headers={'X-Test': '1'}))
        assert res.json() == {'name': 'third'}
        assert api.requests[-1].headers['X-Test'] == '1'

    def test_get_and_head(self, client, api):
        assert client.get(ROOT + '/3rd').json() == {'name': 'third'}
        api.register('/3rd', '', method='HEAD')
        assert client.head(ROOT + '/3rd').status_code == 200
        assert api.requests[-1].method == 'HEAD'

    def test_post(self, client, api):
        client.post(ROOT + '/2nd', 'text/plain', b'hello')
        request = api.requests[-1]
        assert request.body == b'hello'
        assert request.headers['Content-Type'] == 'text/plain'

    def test_post_form(self, client, api):
        client.post_form(ROOT + '/2nd', {'a': '1'})
        request = api.requests[-1]
        assert request.body == b'a=1'
        assert (request.headers['Content-Type'] ==
                'application/x-www-form-urlencoded')


class TestLoggingClient:

    @pytest.fixture
    def client(self, recording_client):
        recording_client.pages.update({
            ROOT: (200, {'_links': {'next': {'href': '/2nd'}}}, {}),
            ROOT + '/2nd': (201, {}, {}),
        })
        return LoggingHttpClient(recording_client)

    def test_navigator_requests_are_logged(self, client, caplog):
        caplog.set_level(logging.INFO, logger='halnavigator.httpclient')
        HALNavigator(ROOT, client=client).follow('next').post({'a': 1})
        messages = [r.getMessage() for r in caplog.records
                    if r.name == 'halnavigator.httpclient']
        assert messages == ['GET ' + ROOT, 'POST ' + ROOT + '/2nd']

    def test_delegates_every_method(self, client, caplog):
        caplog.set_level(logging.INFO, logger='halnavigator.httpclient')
        assert client.get(ROOT).status_code == 200
        assert client.head(ROOT).status_code == 200
        assert client.post(ROOT + '/2nd', 'text/plain', 'x').status_code == 201
        assert client.post_form(ROOT + '/2nd', {'a': '1'}).status_code == 201
        messages = [r.getMessage() for r in caplog.records
                    if r.name == 'halnavigator.httpclient']
        assert messages == ['GET ' + ROOT, 'HEAD ' + ROOT,
                            'POST ' + ROOT + '/2nd', 'POST ' + ROOT + '/2nd']
        assert [r.method for r in client.client.requests] == [
            'GET', 'HEAD', 'POST', 'POST']

    def test_custom_logger_and_level(self, recording_client, caplog):
        recording_client.pages[ROOT] = (200, {}, {})
        logger = logging.getLogger('tests.http')
        client = LoggingHttpClient(recording_client, logger=logger,
                                   level=logging.DEBUG)
        caplog.set_level(logging.DEBUG, logger='tests.http')
        client.get(ROOT)
        assert [r.levelno for r in caplog.records if r.name == 'tests.http'] == [
            logging.DEBUG]
