"""HAL link model.

A resource exposes its links under the ``_links`` member, keyed by relation
name. Each relation maps to either a single link object or an array of link
objects::

    {"_links": {"self": {"href": "/orders"},
                "ea:find": {"href": "/orders{?id}", "templated": true},
                "ea:admin": [{"href": "/admins/2"}, {"href": "/admins/5"}]}}

:class:`Links` is that mapping, :class:`LinkSet` the value stored under one
relation and :class:`Link` a single link object.
"""

import json
import numbers
import re
from collections import namedtuple

import uritemplate

from halnavigator.exc import (EmbeddedNotFoundError, InvalidTemplateError,
                              LinkFormatError)

_OPTIONAL_FIELDS = ('type', 'deprecation', 'name', 'profile', 'title',
                    'hreflang')

_VARCHAR = r'(?:[A-Za-z0-9_]|%[0-9A-Fa-f]{2})'
_VARSPEC = _VARCHAR + r'(?:\.?' + _VARCHAR + r')*(?::[1-9][0-9]{0,3}|\*)?'
_EXPRESSION = re.compile(r'[+#./;?&]?' + _VARSPEC + r'(?:,' + _VARSPEC + r')*\Z')
_TEMPLATED = re.compile(r'\{[^{}]+\}')


def is_templated(href):
    '''Whether an href contains at least one URI template expression'''
    return _TEMPLATED.search(href) is not None


def validate_template(template):
    """Checks the expressions of an RFC 6570 URI template.

    Literal text is passed through untouched, only the ``{...}`` expressions
    and their braces are checked."""
    pos = 0
    while True:
        start = template.find('{', pos)
        close = template.find('}', pos)
        if close != -1 and (start == -1 or close < start):
            raise InvalidTemplateError(template, "unmatched '}}' at {}".format(close))
        if start == -1:
            return
        end = template.find('}', start)
        if end == -1:
            raise InvalidTemplateError(template, "unclosed '{{' at {}".format(start))
        expression = template[start + 1:end]
        if not _EXPRESSION.match(expression):
            raise InvalidTemplateError(
                template, 'bad expression {{{}}}'.format(expression))
        pos = end + 1


def _stringify(value):
    # uritemplate treats 0 as an empty value
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_stringify(v) for v in value]
    return value


def expand(template, params=None):
    """Expands a URI template with `params`.

    Variables missing from `params` are dropped from the result, so a
    template with nothing to expand yields its literal text."""
    validate_template(template)
    if not params:
        params = {}
    params = {k: _stringify(v) for k, v in params.items()}
    return uritemplate.URITemplate(template).expand(params)


class Link(namedtuple('Link', ('href', 'templated') + _OPTIONAL_FIELDS,
                      defaults=(False,) + (None,) * len(_OPTIONAL_FIELDS))):
    """A single hyperlink. Only href is required.

    Empty optional fields are stored as None, the same as absent ones."""

    __slots__ = ()

    def __new__(cls, href, templated=False, *args, **kwargs):
        link = super().__new__(cls, href, bool(templated), *args, **kwargs)
        return link._replace(**{f: None for f in _OPTIONAL_FIELDS
                                if getattr(link, f) == ''})

    def to_json(self):
        out = {'href': self.href}
        if self.templated:
            out['templated'] = True
        for field in _OPTIONAL_FIELDS:
            value = getattr(self, field)
            if value:
                out[field] = value
        return out

    @classmethod
    def from_json(cls, value):
        if not isinstance(value, dict):
            raise LinkFormatError('Expected a link object', value)
        href = value.get('href')
        if not isinstance(href, str):
            raise LinkFormatError('Link object has no href', value)
        templated = value.get('templated', False)
        if not isinstance(templated, bool):
            raise LinkFormatError('Link templated flag is not a boolean', value)
        optional = [value.get(field) for field in _OPTIONAL_FIELDS]
        if not all(v is None or isinstance(v, str) for v in optional):
            raise LinkFormatError('Link metadata must be strings', value)
        return cls(href, templated, *optional)

    def expand(self, params=None):
        return expand(self.href, params)


class LinkSet(list):
    """The links stored under one relation, in order.

    One link serializes as a bare object and several as an array, and both
    shapes deserialize back into a LinkSet."""

    def to_json(self):
        if len(self) == 1:
            return self[0].to_json()
        return [link.to_json() for link in self]

    @classmethod
    def from_json(cls, value):
        if isinstance(value, dict):
            return cls([Link.from_json(value)])
        if isinstance(value, list):
            return cls(Link.from_json(item) for item in value)
        raise LinkFormatError(
            'Expected a link object or an array of link objects', value)

    def dumps(self):
        return json.dumps(self.to_json(), separators=(',', ':'))

    @classmethod
    def loads(cls, data):
        try:
            value = json.loads(data)
        except ValueError as e:
            raise LinkFormatError('Unable to decode link set', data) from e
        return cls.from_json(value)


class Links(dict):
    """Mapping from relation name to :class:`LinkSet`.

    The builder methods return the collection itself so calls chain::

        Links().add_self('/orders').add_link('ea:find', '/orders{?id}')
    """

    def add(self, rel, *links):
        '''Appends links to the relation, creating it when absent'''
        if not links:
            raise ValueError('add() needs at least one link for {!r}'.format(rel))
        self.setdefault(rel, LinkSet()).extend(links)
        return self

    def add_link(self, rel, href, *args):
        '''Adds a link, %-formatting href with args when any are given.

        The link is marked templated if href holds a template expression.'''
        if args:
            href = href % args
        return self.add(rel, Link(href, templated=is_templated(href)))

    def add_self(self, href, *args):
        return self.add_link('self', href, *args)

    def add_next(self, href, *args):
        return self.add_link('next', href, *args)

    def href(self, rel):
        return self.href_params(rel, None)

    def href_params(self, rel, params):
        """Expands the href of the first link for `rel` with `params`.

        Returns '' when there is no such relation. Only the first link of a
        relation is ever considered."""
        links = self.get(rel)
        if not links:
            return ''
        return links[0].expand(params)

    def to_json(self):
        return {rel: self[rel].to_json() for rel in sorted(self) if self[rel]}

    @classmethod
    def from_json(cls, value):
        if not isinstance(value, dict):
            raise LinkFormatError('Expected an object of relations', value)
        links = cls()
        for rel, item in value.items():
            link_set = LinkSet.from_json(item)
            # an empty array means the relation has no links
            if link_set:
                links[rel] = link_set
        return links

    def dumps(self):
        return json.dumps(self.to_json(), separators=(',', ':'))

    @classmethod
    def loads(cls, data):
        try:
            value = json.loads(data)
        except ValueError as e:
            raise LinkFormatError('Unable to decode links', data) from e
        return cls.from_json(value)

    @classmethod
    def from_resource(cls, body):
        '''Reads the _links member of a decoded HAL resource'''
        if not isinstance(body, dict):
            raise LinkFormatError('Expected a resource object', body)
        return cls.from_json(body.get('_links', {}))

    def resource(self, state=None):
        '''Returns a resource body holding `state` and these links'''
        body = {}
        links = self.to_json()
        if links:
            body['_links'] = links
        body.update(state or {})
        return body


def embedded_resource(body, rel):
    """Returns the resource embedded in `body` under `rel`.

    When the relation holds an array of resources the first one is used."""
    embedded = body.get('_embedded') if isinstance(body, dict) else None
    if not isinstance(embedded, dict) or rel not in embedded:
        raise EmbeddedNotFoundError(rel, body)
    resource = embedded[rel]
    if isinstance(resource, list):
        if not resource:
            raise EmbeddedNotFoundError(rel, body)
        resource = resource[0]
    return resource
