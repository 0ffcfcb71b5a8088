"""Helpers shared by the navigator, its operations and the link model."""

import re
from urllib.parse import urlsplit, urlunsplit

import unidecode
from requests.structures import CaseInsensitiveDict

from halnavigator import exc


def fix_scheme(url):
    '''Prepends the http:// scheme if necessary to a url. Fails if a scheme
    other than http or https is used'''
    splitted = url.split('://')
    if len(splitted) == 2:
        if splitted[0] in ('http', 'https'):
            return url
        else:
            raise exc.WileECoyoteException(
                'Bad scheme! Got: {}, expected http or https'.format(splitted[0]))
    elif len(splitted) == 1:
        return 'http://' + url
    else:
        raise exc.ZachMorrisException('Too many schemes!')


def namify(root_uri):
    '''Turns a root uri into a short name for the api.

    'http://www.example.com/api/' becomes 'ExampleApi' '''
    parts = urlsplit(fix_scheme(root_uri))
    labels = (parts.hostname or '').split('.')
    if labels and labels[0] == 'www':
        labels = labels[1:]
    if len(labels) > 1:
        labels = labels[:-1]
    segments = [s for s in parts.path.split('/') if s]
    words = re.split(r'[^0-9A-Za-z]+', unidecode.unidecode(' '.join(labels + segments)))
    return ''.join(w.capitalize() for w in words if w)


def make_absolute(current, root):
    """Makes `current` absolute if it isn't already, borrowing the scheme,
    host and credentials of `root`."""
    parts = urlsplit(current)
    if parts.scheme and parts.netloc:
        return current
    root_parts = urlsplit(root)
    path = parts.path
    if path and not path.startswith('/'):
        path = '/' + path
    return urlunsplit((parts.scheme or root_parts.scheme,
                       parts.netloc or root_parts.netloc,
                       path,
                       parts.query,
                       parts.fragment))


class HeaderDict(CaseInsensitiveDict):
    """Case insensitive multimap from header name to a list of values.

    Assigning a plain string stores a one element list. Copies never share
    their value lists with the original."""

    def __setitem__(self, key, value):
        if isinstance(value, (str, bytes)):
            value = [value]
        super().__setitem__(key, list(value))

    def set(self, name, value):
        '''Replaces every value of `name` with `value`'''
        self[name] = value

    def add(self, name, value):
        '''Appends `value` to the values of `name`'''
        values = self.get(name)
        if values is None:
            self[name] = [value]
        else:
            values.append(value)

    def extend(self, headers):
        '''Adds every value from another mapping of headers'''
        if headers is None:
            return
        for name, values in headers.items():
            if isinstance(values, (str, bytes)):
                values = [values]
            for value in values:
                self.add(name, value)

    def copy(self):
        return HeaderDict(self.items())

    def flatten(self):
        '''Returns a plain dict with multiple values joined by commas'''
        return {name: ', '.join(values) for name, values in self.items()}
