"""The transport a navigator sends its requests through.

Anything implementing :class:`HttpClient` can be handed to a navigator, which
makes logging or caching decorators trivial to write.
:class:`LoggingHttpClient` is one.
"""

import abc
import logging

import cachecontrol
import requests

log = logging.getLogger(__name__)


class HttpClient(abc.ABC):
    """Core request methods, modelled on requests.Session.

    Implementations must be safe to share between navigators used from
    several threads."""

    @abc.abstractmethod
    def do(self, request):
        '''Sends a requests.Request and returns the requests.Response'''

    @abc.abstractmethod
    def get(self, url):
        pass

    @abc.abstractmethod
    def head(self, url):
        pass

    @abc.abstractmethod
    def post(self, url, content_type, body):
        pass

    @abc.abstractmethod
    def post_form(self, url, data):
        pass


class RequestsHttpClient(HttpClient):
    """HttpClient backed by a requests.Session

    `cache` may be True or a cachecontrol.CacheControlAdapter to mount for
    http and https."""

    def __init__(self, session=None, auth=None, cache=False):
        self.session = session or requests.Session()
        if cache:
            if isinstance(cache, cachecontrol.CacheControlAdapter):
                cc = cache
            else:
                cc = cachecontrol.CacheControlAdapter()
            self.session.mount('http://', cc)
            self.session.mount('https://', cc)
        if auth is not None:
            self.session.auth = auth

    def do(self, request):
        if isinstance(request, requests.Request):
            request = self.session.prepare_request(request)
        settings = self.session.merge_environment_settings(
            request.url, {}, None, None, None)
        return self.session.send(request, **settings)

    def get(self, url):
        return self.session.get(url)

    def head(self, url):
        return self.session.head(url)

    def post(self, url, content_type, body):
        return self.session.post(url, data=body,
                                 headers={'Content-Type': content_type})

    def post_form(self, url, data):
        return self.session.post(url, data=data)


class LoggingHttpClient(HttpClient):
    """Wraps another HttpClient and logs the method and url of every
    request before passing it on."""

    def __init__(self, client, logger=None, level=logging.INFO):
        self.client = client
        self.logger = logger or log
        self.level = level

    def do(self, request):
        self.logger.log(self.level, '%s %s', request.method, request.url)
        return self.client.do(request)

    def get(self, url):
        self.logger.log(self.level, 'GET %s', url)
        return self.client.get(url)

    def head(self, url):
        self.logger.log(self.level, 'HEAD %s', url)
        return self.client.head(url)

    def post(self, url, content_type, body):
        self.logger.log(self.level, 'POST %s', url)
        return self.client.post(url, content_type, body)

    def post_form(self, url, data):
        self.logger.log(self.level, 'POST %s', url)
        return self.client.post_form(url, data)
