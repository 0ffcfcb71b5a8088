from halnavigator.halnav import HALNavigator, default_headers, __version__
from halnavigator.httpclient import (HttpClient, LoggingHttpClient,
                                     RequestsHttpClient)
from halnavigator.links import Link, Links, LinkSet
from halnavigator.operations import Extract, Follow, Operation
from halnavigator.exc import (EmbeddedNotFoundError, HALNavigatorError,
                              InvalidTemplateError, InvalidUrlError,
                              LinkFormatError, LinkNotFoundError,
                              MissingLocationError, UnexpectedlyNotJSON)
