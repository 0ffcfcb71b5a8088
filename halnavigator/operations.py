"""Steps of a navigation path.

Each step turns the url of the current resource into the url of the next
one. A navigator walks its steps in order without knowing which kind each
one is.
"""

import abc
import copy

from halnavigator import exc, utils
from halnavigator.links import Links, embedded_resource


class Operation(abc.ABC):
    """A single hop, with headers sent only on the request made for it"""

    def __init__(self, rel, headers=None):
        self.rel = rel
        self.headers = utils.HeaderDict(headers or {})

    @abc.abstractmethod
    def fetch(self, nav, url):
        '''Requests `url` through `nav` and returns the next url'''

    def set_header(self, name, value):
        self.headers.set(name, value)

    def add_header(self, name, value):
        self.headers.add(name, value)

    def copy(self):
        cp = copy.copy(self)
        cp.headers = self.headers.copy()
        return cp

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __repr__(self):
        return '{}({!r})'.format(type(self).__name__, self.rel)


class Follow(Operation):
    """Follows the link for a relation, expanding it with params"""

    def __init__(self, rel, params=None, headers=None):
        super().__init__(rel, headers)
        self.params = dict(params) if params else None

    def fetch(self, nav, url):
        links = nav.get_links(url, self.headers)
        if self.rel not in links:
            raise exc.LinkNotFoundError(self.rel, links.keys())
        href = links.href_params(self.rel, self.params)
        if not href:
            raise exc.InvalidUrlError(href, self.rel)
        return href

    def __str__(self):
        if not self.params:
            return '.' + self.rel
        args = ','.join('{}={}'.format(k, v) for k, v in sorted(self.params.items()))
        return '.{}({})'.format(self.rel, args)

    def __repr__(self):
        return 'Follow({!r}, {!r})'.format(self.rel, self.params)


class Extract(Operation):
    """Jumps to the self link of a resource embedded under a relation"""

    def fetch(self, nav, url):
        body = nav.get_resource(url, self.headers)
        resource = embedded_resource(body, self.rel)
        href = Links.from_resource(resource).href('self')
        if not href:
            raise exc.InvalidUrlError(href, self.rel)
        return href

    def __str__(self):
        return '[{}]'.format(self.rel)
