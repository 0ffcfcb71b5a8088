class WileECoyoteException(ValueError):
    '''Raised when a url has a bad scheme'''
    pass


class ZachMorrisException(ValueError):
    '''Raised when a url has too many schemes'''
    pass


class HALNavigatorError(Exception):
    """Raised when a response is an error

    Carries the navigator that issued the request. The error body can be
    examined through response.text """

    def __init__(self, message, nav=None, status=None, response=None):
        self.nav = nav
        self.response = response
        self.message = message
        self.status = status
        super().__init__(message)


class UnexpectedlyNotJSON(TypeError):
    """Raised when a non-json parseable resource is gotten"""

    def __init__(self, msg, response):
        self.msg = msg
        self.response = response
        super().__init__(msg)

    def __repr__(self):  # pragma: nocover
        return '{0.msg}:\n\n\n{0.response}'.format(self)


class LinkNotFoundError(LookupError):
    """Raised when a resource has no link with the requested relation"""

    def __init__(self, rel, available=()):
        self.rel = rel
        self.available = sorted(available)
        super().__init__(rel)

    def __str__(self):
        msg = "Response didn't contain link with relation: {}".format(self.rel)
        if self.available:
            msg += ' (available: {})'.format(', '.join(self.available))
        return msg


class EmbeddedNotFoundError(LookupError):
    """Raised when a resource has no embedded resource for a relation"""

    def __init__(self, rel, body=None):
        self.rel = rel
        self.body = body
        super().__init__(rel)

    def __str__(self):
        return "Response didn't contain embedded resource: {}".format(self.rel)


class InvalidUrlError(ValueError):
    """Raised when a relation resolves to an empty or unusable url"""

    def __init__(self, url, rel=None):
        self.url = url
        self.rel = rel
        super().__init__(url)

    def __str__(self):
        if self.rel is not None:
            return 'Relation {!r} resolved to an invalid url: {!r}'.format(
                self.rel, self.url)
        return 'Invalid url: {!r}'.format(self.url)


class LinkFormatError(ValueError):
    """Raised when a link or link set has an unsupported JSON shape"""

    def __init__(self, msg, data=None):
        self.msg = msg
        self.data = data
        super().__init__(msg)

    def __str__(self):
        if self.data is None:
            return self.msg
        return '{}: {!r}'.format(self.msg, self.data)


class InvalidTemplateError(ValueError):
    """Raised when an href is not a valid URI template"""

    def __init__(self, template, reason):
        self.template = template
        self.reason = reason
        super().__init__(template)

    def __str__(self):
        return 'Invalid URI template {!r}: {}'.format(self.template, self.reason)


class MissingLocationError(ValueError):
    """Raised when pivoting on a response without a Location header"""

    def __init__(self, response):
        self.response = response
        super().__init__("Response didn't contain a Location header")
