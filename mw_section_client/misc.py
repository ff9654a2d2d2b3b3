"""This submodule contains the small classes."""
from http.cookiejar import CookieJar
from .excs import InvalidArgument, ProtocolError

__all__ = [
    'Meta',
    'Section',
    'LoginResult',
    'EditResult',
    'PurgedPage',
    'NEW_SECTION',
    'TOKEN_KINDS',
]

#: Section reference that tells action=edit to append a new section.
NEW_SECTION = 'new'

#: Token kinds understood by Meta.tokens, mapped to their response field.
TOKEN_KINDS = {
    'login': 'logintoken',
    'csrf': 'csrftoken',
    'userrights': 'userrightstoken',
}

_TOKEN_ALIASES = {
    'user-rights': 'userrights',
}

def narrow(data, path, kind=dict, what='response'):
    """Follow the keys in ``path`` down ``data`` and return what is there.

    Every step must be a dict and the final value must be an instance
    of ``kind``; otherwise raise ProtocolError naming the broken path.
    """
    node = data
    walked = []
    for key in path:
        walked.append(key)
        if not isinstance(node, dict) or key not in node:
            raise ProtocolError(
                '{}: missing {!r} in response: {!r}'.format(
                    what, '.'.join(walked), data),
                data, '.'.join(walked))
        node = node[key]
    if not isinstance(node, kind):
        raise ProtocolError(
            '{}: {!r} is {}, expected {}: {!r}'.format(
                what, '.'.join(walked), type(node).__name__,
                getattr(kind, '__name__', kind), data),
            data, '.'.join(walked))
    return node

def cookie_header(cookies):
    """Serialize a cookie jar or a name -> value mapping into the value
    of a Cookie header. Returns None for no cookies.
    """
    if not cookies:
        return None
    if isinstance(cookies, CookieJar):
        pairs = [(cookie.name, cookie.value) for cookie in cookies]
    else:
        pairs = list(cookies.items())
    if not pairs:
        return None
    return '; '.join('{}={}'.format(name, value) for name, value in pairs)

class Section(object):
    """One entry of a page's table of contents, from action=parse."""
    def __init__(self, index, line, level, toclevel=None,
                 number=None, anchor=None, **_):
        self.index = str(index)
        self.line = line
        # levels come back as strings; keep them that way
        self.level = str(level)
        self.toclevel = toclevel
        self.number = number
        self.anchor = anchor

    def __repr__(self):
        """Represent a section."""
        return "<Section {idx} {line!r} (level {lvl})>".format(
            idx=self.index, line=self.line, lvl=self.level)

    __str__ = __repr__

    def __eq__(self, other):
        """Check if two sections are the same."""
        return (self.index, self.line, self.level) \
            == (other.index, other.line, other.level)

    def __hash__(self):
        """Section.__hash__() <==> hash(Section)"""
        return hash((self.index, self.line, self.level))

class LoginResult(object):
    """The outcome of a successful action=login.

    ``cookies`` is the session to pass to later calls.
    """
    def __init__(self, cookies, result=None, lguserid=None,
                 lgusername=None, **data):
        self.cookies = cookies
        self.result = result
        self.lguserid = lguserid
        self.lgusername = lgusername
        self.__dict__.update(data)

    def __repr__(self):
        """Represent a login result."""
        return "<LoginResult {res} as {name}>".format(
            res=self.result, name=self.lgusername)

    __str__ = __repr__

    def __bool__(self):
        return self.result == 'Success'

class EditResult(object):
    """The ``edit`` object of an action=edit response."""
    def __init__(self, result=None, pageid=None, title=None,
                 contentmodel=None, oldrevid=None, newrevid=None,
                 newtimestamp=None, **data):
        self.result = result
        self.pageid = pageid
        self.title = title
        self.contentmodel = contentmodel
        self.oldrevid = oldrevid
        self.newrevid = newrevid
        self.newtimestamp = newtimestamp
        # present (as an empty string) when the text did not change
        self.nochange = 'nochange' in data
        data.pop('nochange', None)
        self.__dict__.update(data)

    def __repr__(self):
        """Represent an edit result."""
        return "<EditResult {res} of {title} r{rev}>".format(
            res=self.result, title=self.title, rev=self.newrevid)

    __str__ = __repr__

    def __bool__(self):
        return self.result == 'Success'

class PurgedPage(object):
    """One entry of an action=purge response."""
    def __init__(self, title=None, ns=None, **data):
        self.title = title
        self.ns = ns
        self.purged = 'purged' in data
        self.missing = 'missing' in data
        self.invalid = 'invalid' in data

    def __repr__(self):
        """Represent a purged page."""
        return "<PurgedPage {title} purged={purged}>".format(
            title=self.title, purged=self.purged)

    __str__ = __repr__

    def __eq__(self, other):
        """Check if two purge entries are the same."""
        return self.title == other.title

    def __hash__(self):
        """PurgedPage.__hash__() <==> hash(PurgedPage)"""
        return hash(self.title)

class Meta(object):
    """A separate class for the API "meta" module."""
    def __init__(self, wiki):
        """Initialize the instance with its wiki."""
        self.wiki = wiki

    def __repr__(self):
        """Represent the Meta instance (there should only ever be one!)."""
        return '<Meta>'

    __str__ = __repr__

    def tokens(self, kind="csrf", cookies=None):
        """Get a token of the given kind.

        ``kind`` is one of "login", "csrf" or "userrights".
        ``cookies`` is the session the token must be bound to; leave it
        out for the login token, which starts a fresh session.

        Returns ``(token, cookies)``. The cookies are the ones this
        response set, and are the ones to send along with the token.
        Tokens are never cached: every call asks the wiki again.
        """
        kind = _TOKEN_ALIASES.get(kind, kind)
        if kind not in TOKEN_KINDS:
            raise InvalidArgument(
                'token kind is not recognized: {!r}'.format(kind))
        params = {
            'action': 'query',
            'meta': 'tokens',
            'type': kind
        }
        data, newcookies = self.wiki.request(
            _post=True, _cookies=cookies, _with_cookies=True, **params)
        tokens = narrow(data, ('query', 'tokens'), what='tokens')
        field = TOKEN_KINDS[kind]
        token = tokens.get(field)
        if not isinstance(token, str) or not token:
            raise ProtocolError(
                'tokens: empty or missing {}: {!r}'.format(field, data),
                data, 'query.tokens.' + field)
        return token, newcookies
