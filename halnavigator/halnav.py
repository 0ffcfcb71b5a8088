"""A library to make navigating HAL apis easy."""

import contextlib
import copy
import json
import logging
from urllib.parse import urlencode

import requests
import unidecode

from halnavigator import exc, utils
from halnavigator.httpclient import RequestsHttpClient
from halnavigator.links import Links
from halnavigator.operations import Extract, Follow

__version__ = '0.1'

log = logging.getLogger(__name__)


def default_headers():
    """Default headers for HALNavigator"""
    return {'Accept': 'application/hal+json, application/json',
            'User-Agent': 'HALNavigator/{}'.format(__version__)}


class HALNavigator:
    """Navigates a HAL api by following relations from a root resource.

    Navigation is lazy. Chaining follow() and extract() only records the
    path; requests are made once a terminal method such as get(), post() or
    unmarshal() is called. To GET the second page of products::

        HALNavigator('http://api.example.com') \\
            .follow('products') \\
            .follow_with_params('page', {'number': 2}) \\
            .get()

    A navigator is never modified once built. Every chaining method returns
    a new navigator, so several chains can branch off a common one.
    """

    def __init__(self, root,
                 apiname=None,
                 auth=None,
                 headers=None,
                 session=None,
                 cache=False,
                 client=None):
        if client is not None and (session is not None or auth or cache):
            raise ValueError(
                'Pass either a client or session/auth/cache options, not both')
        self.root = utils.fix_scheme(root)
        self.apiname = utils.namify(root) if apiname is None else apiname
        self.client = client or RequestsHttpClient(
            session=session, auth=auth, cache=cache)
        self.session_headers = utils.HeaderDict(default_headers())
        if headers:
            for name, value in headers.items():
                self.session_headers.set(name, value)
        self.path = ()

    def __repr__(self):
        path = unidecode.unidecode(''.join(str(op) for op in self.path))
        return "{cls}({name}{path})".format(
            cls=type(self).__name__, name=self.apiname, path=path)

    def __eq__(self, other):
        try:
            return (self.root == other.root
                    and self.apiname == other.apiname
                    and self.path == other.path
                    and self.session_headers == other.session_headers)
        except AttributeError:
            return False

    __hash__ = None

    def _copy(self, **attrs):
        """Shallow copy with its own session headers. The client is shared."""
        cp = copy.copy(self)
        cp.session_headers = self.session_headers.copy()
        for attr, val in attrs.items():
            setattr(cp, attr, val)
        return cp

    def follow(self, rel, params=None):
        """Adds a relation to the path, to be expanded with `params` if its
        link is a URI template"""
        return self._copy(path=self.path + (Follow(rel, params),))

    def follow_with_params(self, rel, params):
        return self.follow(rel, params)

    def extract(self, rel):
        """Adds a step to the self link of the resource embedded under `rel`"""
        return self._copy(path=self.path + (Extract(rel),))

    def set_session_header(self, name, value):
        """Sets a header on every request made by the new navigator"""
        cp = self._copy()
        cp.session_headers.set(name, value)
        return cp

    def add_session_header(self, name, value):
        cp = self._copy()
        cp.session_headers.add(name, value)
        return cp

    def add_headers(self, headers):
        """Adds every header in `headers` to the session headers"""
        cp = self._copy()
        cp.session_headers.extend(headers)
        return cp

    def set_request_header(self, name, value):
        """Sets a header only on the request for the last relation followed.

        This navigator is left untouched. The header is only sent by the
        returned navigator, so keep using that one::

            nav = nav.follow('orders').set_request_header('If-None-Match', tag)
        """
        return self._with_last_operation(lambda op: op.set_header(name, value))

    def add_request_header(self, name, value):
        """Adds a header value to the request for the last relation followed.

        Like set_request_header(), only the returned navigator sends it."""
        return self._with_last_operation(lambda op: op.add_header(name, value))

    def _with_last_operation(self, change):
        if not self.path:
            log.warning('No relation to attach a request header to, ignoring')
            return self
        last = self.path[-1].copy()
        change(last)
        return self._copy(path=self.path[:-1] + (last,))

    def location(self, response):
        """Starts a new navigator at the Location header of `response`.

        The new navigator keeps this one's client and session headers."""
        loc = response.headers.get('Location')
        if loc is None:
            raise exc.MissingLocationError(response)
        try:
            uri = utils.make_absolute(loc, self.root)
        except ValueError as e:
            raise exc.InvalidUrlError(loc) from e
        return self._copy(root=uri, path=())

    def resolve(self):
        """Walks the path and returns the url at its tip.

        Starts at the root and requests each resource along the path in
        turn. Any error ends the walk."""
        url = self.root
        for operation in self.path:
            log.debug('Resolving %r at %s', operation, url)
            href = operation.fetch(self, url)
            try:
                url = utils.make_absolute(href, self.root)
            except ValueError as e:
                raise exc.InvalidUrlError(href, operation.rel) from e
        return url

    url = resolve

    def _build_request(self, method, url,
                       step_headers=None,
                       headers=None,
                       body=None,
                       content_type=None):
        merged = self.session_headers.copy()
        merged.extend(step_headers)
        if content_type is not None:
            merged.set('Content-Type', content_type)
        if headers:
            for name, value in headers.items():
                merged.set(name, value)
        if isinstance(body, str):
            body = body.encode('utf-8')
        return requests.Request(method, url, headers=merged.flatten(), data=body)

    def _error(self, response):
        message = response.text
        response.close()
        return exc.HALNavigatorError(
            message=message,
            status=response.status_code,
            nav=self,
            response=response,
        )

    def get_resource(self, url, step_headers=None):
        """GETs `url` and returns the decoded JSON body"""
        request = self._build_request('GET', url, step_headers=step_headers)
        log.debug('GET %s', url)
        with contextlib.closing(self.client.do(request)) as response:
            if not response:
                raise self._error(response)
            try:
                return json.loads(response.content)
            except ValueError as e:
                raise exc.UnexpectedlyNotJSON(
                    "The resource at {} wasn't valid JSON".format(url),
                    response) from e

    def get_links(self, url, step_headers=None):
        """GETs `url` and returns the links of the resource"""
        return Links.from_resource(self.get_resource(url, step_headers))

    def _send(self, method, headers=None, body=None, content_type=None,
              raise_exc=False):
        url = self.resolve()
        request = self._build_request(method, url,
                                      headers=headers,
                                      body=body,
                                      content_type=content_type)
        log.debug('%s %s', method, url)
        response = self.client.do(request)
        if raise_exc and not response:
            raise self._error(response)
        return response

    def get(self, headers=None, raise_exc=False):
        """GETs the resource at the tip of the path.

        `headers` are added to this request only and win over session
        headers of the same name. With `raise_exc` an error status raises
        HALNavigatorError instead of returning the response."""
        return self._send('GET', headers=headers, raise_exc=raise_exc)

    def options(self, headers=None, raise_exc=False):
        return self._send('OPTIONS', headers=headers, raise_exc=raise_exc)

    def delete(self, headers=None, raise_exc=False):
        return self._send('DELETE', headers=headers, raise_exc=raise_exc)

    def post_form(self, data, headers=None, raise_exc=False):
        """POSTs `data` url-encoded to the tip of the path"""
        return self._send('POST',
                          headers=headers,
                          body=urlencode(data, doseq=True),
                          content_type='application/x-www-form-urlencoded',
                          raise_exc=raise_exc)

    def _send_body(self, method, body, content_type, headers, json_cls,
                   raise_exc):
        if isinstance(body, dict):
            body = json.dumps(body, cls=json_cls, separators=(',', ':'))
        return self._send(method,
                          headers=headers,
                          body=body,
                          content_type=content_type,
                          raise_exc=raise_exc)

    def post(self, body=None, content_type='application/json', headers=None,
             json_cls=None, raise_exc=False):
        """POSTs `body` to the tip of the path.

        `body` may either be a string, bytes, a file or a dictionary which
        will be serialized as json using `json_cls` if given."""
        return self._send_body('POST', body, content_type, headers, json_cls,
                               raise_exc)

    def put(self, body=None, content_type='application/json', headers=None,
            json_cls=None, raise_exc=False):
        return self._send_body('PUT', body, content_type, headers, json_cls,
                               raise_exc)

    def patch(self, body=None, content_type='application/json', headers=None,
              json_cls=None, raise_exc=False):
        return self._send_body('PATCH', body, content_type, headers, json_cls,
                               raise_exc)

    def unmarshal(self, target=None, raise_exc=False):
        """GETs the tip of the path and decodes its JSON body.

        Returns the decoded value when `target` is None. A mapping `target`
        is updated in place and returned, any other `target` is called with
        the decoded value. The response is closed in every case."""
        response = self.get(raise_exc=raise_exc)
        with contextlib.closing(response):
            try:
                value = json.loads(response.content)
            except ValueError as e:
                raise exc.UnexpectedlyNotJSON(
                    "The resource at {} wasn't valid JSON".format(response.url),
                    response) from e
        if target is None:
            return value
        if hasattr(target, 'update'):
            target.update(value)
            return target
        return target(value)
