import collections
import json

import httpretty
import pytest
import requests

from halnavigator.httpclient import HttpClient

ROOT = 'http://example.com'


@pytest.fixture
def http(request):
    httpretty.HTTPretty.enable()

    def finalizer():
        httpretty.HTTPretty.disable()
        httpretty.HTTPretty.reset()
    request.addfinalizer(finalizer)
    return httpretty.HTTPretty


class FakeApi:
    '''Registers pages with httpretty and records the requests they get.

    Registering a route again replaces the page it serves.'''

    def __init__(self, root):
        self.root = root
        self.hits = collections.Counter()
        self.requests = []
        self.pages = {}

    @property
    def paths(self):
        return [r.path for r in self.requests]

    def register(self, path, body, method='GET', status=200, headers=None):
        if not isinstance(body, str):
            body = json.dumps(body)
        route = (method, path)
        if route not in self.pages:
            httpretty.HTTPretty.register_uri(
                method, self.root + path, body=self._callback(route))
        self.pages[route] = (status, headers or {}, body)

    def _callback(self, route):
        def callback(request, uri, response_headers):
            status, headers, body = self.pages[route]
            self.hits[route[1]] += 1
            self.requests.append(request)
            response_headers.update(headers)
            return [status, response_headers, body]
        return callback


@pytest.fixture
def api(http):
    '''The root links to /2nd directly and to /a/{id} through a template'''
    fake = FakeApi(ROOT)
    fake.register('/', {
        '_links': {
            'next': {'href': ROOT + '/2nd'},
            'one': {'href': ROOT + '/a/{id}', 'templated': True},
            'relative': {'href': '/2nd'},
        },
    })
    fake.register('/2nd', {
        '_links': {'third': {'href': '/3rd'}},
        'name': 'second',
    })
    fake.register('/3rd', {'name': 'third'})
    fake.register('/a/1', {'id': 1})
    return fake


class TrackedResponse(requests.Response):
    closed = False

    def close(self):
        self.closed = True


def make_response(body=b'', status=200, url=None, headers=None):
    if not isinstance(body, bytes):
        body = json.dumps(body).encode('utf-8')
    response = TrackedResponse()
    response.status_code = status
    response._content = body
    response.url = url
    response.headers.update(headers or {})
    return response


class RecordingClient(HttpClient):
    '''In memory HttpClient answering from a dict of url -> response'''

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.requests = []
        self.responses = []

    def do(self, request):
        self.requests.append(request)
        status, body, headers = self.pages[request.url]
        response = make_response(body, status, request.url, headers)
        self.responses.append(response)
        return response

    def get(self, url):
        return self.do(requests.Request('GET', url))

    def head(self, url):
        return self.do(requests.Request('HEAD', url))

    def post(self, url, content_type, body):
        return self.do(requests.Request(
            'POST', url, data=body, headers={'Content-Type': content_type}))

    def post_form(self, url, data):
        return self.do(requests.Request('POST', url, data=data))


@pytest.fixture
def recording_client():
    return RecordingClient()
