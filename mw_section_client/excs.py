"""
mw_section_client.excs - Exceptions for API requests.

Every error raised by this package is a ``WikiError``. Errors reported
by the wiki itself are raised as a subclass named after the API error
code, which is created on first access. To catch a bad token:

..code-block:: python

    try:
        page.edit_section(markup, 'Publications', name, password)
    except mw.EditError.badtoken as exc:
        print('Token did not match the session:', exc)

To catch any rejected edit, use the following:

..code-block:: python

    try:
        page.edit_section(markup, 'Publications', name, password)
    except mw.EditError as exc:
        print(exc.code, exc)
"""

__all__ = [
    'WikiError',
    'TransportError',
    'DecodeError',
    'ProtocolError',
    'APIError',
    'AuthError',
    'EditError',
    'InvalidArgument',
    'WikiWarning',
    'coded',
]

class _MetaGetattr(type):
    """Metaclass to provide __getattr__ on a class."""
    def __getattr__(cls, name):
        if name.startswith('_'):
            raise AttributeError(name)
        setattr(cls, name, type(name, (cls,), {}))
        return getattr(cls, name)

#pylint: disable=too-few-public-methods
class WikiError(Exception, metaclass=_MetaGetattr):
    """Base class for everything this package raises.

    ``response`` is the decoded API response, if there was one.
    """
    def __init__(self, message='', response=None):
        super().__init__(message)
        self.response = response

    @property
    def code(self):
        """Return the exception code: the API error code for
        per-code subclasses, otherwise the class name.
        """
        return type(self).__name__

class TransportError(WikiError):
    """The request never produced a usable HTTP response: the network
    failed or the status was above 200.
    """
    def __init__(self, message='', status=None):
        super().__init__(message)
        self.status = status

class DecodeError(WikiError):
    """The response body is not a JSON object."""

class ProtocolError(WikiError):
    """The response is well-formed JSON but a field we need is missing
    or has the wrong type. ``path`` names the field.
    """
    def __init__(self, message='', response=None, path=None):
        super().__init__(message, response)
        self.path = path

class APIError(WikiError):
    """The wiki returned an error for a read or purge request."""

class AuthError(WikiError):
    """The wiki rejected the login."""

class EditError(WikiError):
    """The wiki rejected the edit, e.g. permissions, bad token,
    edit conflict or a bad content model.
    """

class InvalidArgument(WikiError, ValueError):
    """An argument is not one this package understands."""

class WikiWarning(UserWarning, metaclass=_MetaGetattr):
    """The API sent a warning in the response."""

_RESERVED = frozenset(dir(Exception)) | {'code', 'response', 'status', 'path'}

def coded(cls, code):
    """Return the subclass of ``cls`` for the API error ``code``.

    Codes that are not valid identifiers, or that collide with an
    existing attribute, fall back to ``cls`` itself.
    """
    if not isinstance(code, str) or not code.isidentifier() \
            or code.startswith('_'):
        return cls
    if code in _RESERVED:
        return cls
    sub = cls.__dict__.get(code)
    if sub is None:
        sub = type(code, (cls,), {})
        setattr(cls, code, sub)
    if isinstance(sub, type) and issubclass(sub, cls):
        return sub
    return cls
