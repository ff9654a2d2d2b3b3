"""
See the Wiki docstrings.
"""
import logging
from http.cookiejar import DefaultCookiePolicy
from warnings import warn as _warn
import requests
from .page import Page
from .excs import (WikiWarning, TransportError, DecodeError,
                   ProtocolError, APIError, AuthError, InvalidArgument, coded)
from .misc import Meta, LoginResult, PurgedPage, narrow, cookie_header
from . import USER_AGENT, CONTENT_MODEL

logger = logging.getLogger(__name__)

# values of these parameters never reach the log
_SECRET_PARAMS = frozenset(('lgpassword', 'lgtoken', 'token'))

class _NoCookies(DefaultCookiePolicy):
    """Cookie policy that never stores a cookie in the session's jar.

    Authentication state lives only in the cookie sets the caller
    passes around; response.cookies is still filled in by requests.
    """
    def set_ok(self, cookie, request):
        return False

def _session():
    session = requests.Session()
    session.cookies.set_policy(_NoCookies())
    return session

def _loggable(params):
    return {key: ('<hidden>' if key in _SECRET_PARAMS else value)
            for key, value in params.items()}

class Wiki(object): #pylint: disable=too-many-public-methods
    #pylint: disable=too-many-arguments
    """The base class for a wiki. Holds the endpoint and the HTTP
    client, and does every request.

    No login state is kept here: ``login`` returns the session
    cookies and the caller passes them to whatever needs them.
    """

    def __init__(self, endpoint, user_agent=None, timeout=None,
                 session=None):
        """Initialize a wiki with its URLs.

        ``endpoint`` is the base URI of the wiki's scripts, the
        directory holding api.php (e.g. https://example.org/w).
        If user_agent is specified, all requests will use that user agent.
        Otherwise, a generic user agent is used.
        ``timeout`` is passed to every request; None waits forever.
        ``session`` is anything shaped like a requests.Session; by
        default a new Session that refuses to remember cookies.
        """
        self.endpoint = endpoint.rstrip('/')
        self.api_url = self.endpoint + '/api.php'
        if user_agent is not None:
            self.user_agent = user_agent
        else:
            self.user_agent = USER_AGENT
        self.timeout = timeout
        self.meta = Meta(self)
        self._session = session if session is not None else _session()

    def __repr__(self):
        """Represent a Wiki object."""
        return "<Wiki at {addr}>".format(addr=self.endpoint)

    def __eq__(self, other):
        """Check if two Wikis are equal."""
        return self.api_url == other.api_url

    def __hash__(self):
        """Wiki.__hash__() <==> hash(Wiki)"""
        return hash(self.api_url)

    __str__ = __repr__

    def request(self, _post=False, _cookies=None, _error=APIError,
                _with_cookies=False, **params):
        """Inner request method.

        Remains public since it might be used per se.

        GET (or POST if ``_post``) ``params`` to api.php and return the
        decoded response. ``_cookies`` is sent in the Cookie header.
        An error in the response is raised as the subclass of
        ``_error`` named after its code. With ``_with_cookies``, return
        ``(data, cookies)`` where cookies are the ones the response set.
        """
        params["format"] = "json"

        headers = {
            "User-Agent": self.user_agent,
        }
        cookie = cookie_header(_cookies)
        if cookie is not None:
            headers["Cookie"] = cookie

        method = 'POST' if _post else 'GET'
        logger.debug('%s %s %s', method, self.api_url, _loggable(params))
        try:
            if _post:
                response = self._session.post(self.api_url, data=params,
                                              headers=headers,
                                              timeout=self.timeout)
            else:
                response = self._session.get(self.api_url, params=params,
                                             headers=headers,
                                             timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            raise TransportError('{} {} failed: {}'.format(
                method, self.api_url, exc)) from exc

        logger.debug('%s %s -> %s', method, self.api_url,
                     response.status_code)
        # anything above 200 is refused, including the other 2xx codes
        if response.status_code > 200:
            raise TransportError('{} {}: bad HTTP status {}'.format(
                method, self.api_url, response.status_code),
                                 response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise DecodeError('{} {}: response is not JSON: {}'.format(
                method, self.api_url, exc)) from exc
        if not isinstance(data, dict):
            raise DecodeError('{} {}: expected a JSON object, got {}'.format(
                method, self.api_url, type(data).__name__), data)

        self._raise_error(data, _error, params.get('action'))

        if 'warnings' in data:
            warnings = narrow(data, ('warnings',), what='warnings')
            for module, value in warnings.items():
                if isinstance(value, dict):
                    value = value.get('*', value.get('warnings', value))
                _warn('warning from {} module: {}'.format(
                    module,
                    value
                ), coded(WikiWarning, module))

        if _with_cookies:
            return data, response.cookies
        return data

    @staticmethod
    def _raise_error(data, error, action):
        """Raise ``error`` (or its per-code subclass) if ``data``
        carries a top-level error.
        """
        if 'error' not in data:
            return
        err = data['error']
        if isinstance(err, str):
            if not err:
                return
            raise error('{}: error response: {}'.format(action, err), data)
        if isinstance(err, dict):
            code = err.get('code', '')
            raise coded(error, code)('{}: {}: {}'.format(
                action, code, err.get('info', '')), data)
        raise error('{}: error response: {!r}'.format(action, err), data)

    def post_request(self, **params):
        """Alias for Wiki.request(_post=True)"""
        return self.request(_post=True, **params)

    def login(self, username, password):
        """Login with a username and password.

        Two round trips: a login token (fresh session), then
        action=login presenting that token's cookies. Returns a
        LoginResult whose ``cookies`` are the logged-in session;
        raises AuthError if the wiki says no.
        """
        lgtoken, cookies = self.meta.tokens('login')
        params = {
            'action': 'login',
            'lgname': username,
            'lgpassword': password,
            'lgtoken': lgtoken
        }
        data, cookies = self.request(_post=True, _cookies=cookies,
                                     _error=AuthError, _with_cookies=True,
                                     **params)
        login = narrow(data, ('login',), what='login')
        result = login.get('result')
        if result != 'Success':
            raise coded(AuthError, result)(
                'login: {} as {}: {}'.format(
                    result, username, login.get('reason', data)), data)
        logger.info('Logged in to %s as %s', self.endpoint, username)
        return LoginResult(cookies, **login)

    def page(self, title, **evil):
        """Return a Page instance based off of the title of the page."""
        if isinstance(title, Page):
            return title
        return Page(self, title=title, **evil)

    def category(self, title, **evil):
        """Return a Page instance based off of the title of the page
        with `Category:` prepended.
        """
        if isinstance(title, Page):
            return title
        return Page(self, title='Category:' + title, **evil)

    def update_page(self, title, markup, contentmodel, username, password,
                    section_title, summary=None):
        """Log in and put ``markup`` into the level-2 section
        ``section_title`` of page ``title``. See Page.edit_section.
        """
        return self.page(title).edit_section(
            markup, section_title, username, password,
            contentmodel=contentmodel or CONTENT_MODEL, summary=summary)

    def purge(self, *titles, **evil):
        """Purge the parser cache of the given pages.

        Returns a list of PurgedPage, one per title. The wiki reports
        one entry per title it handled, so any other count is an error.
        ``cookies`` may be passed to purge as a logged-in user.
        """
        if not titles:
            raise InvalidArgument('purge: no titles given')
        cookies = evil.pop('cookies', None)
        params = {
            'action': 'purge',
            'titles': '|'.join(titles),
        }
        params.update(evil)
        data = self.request(_post=True, _cookies=cookies, **params)
        purged = narrow(data, ('purge',), list, what='purge')
        if len(purged) != len(titles):
            raise ProtocolError(
                'purge: asked for {} titles, {} came back: {!r}'.format(
                    len(titles), len(purged), data), data, 'purge')
        for item in purged:
            if not isinstance(item, dict):
                raise ProtocolError(
                    'purge: unexpected entry {!r}'.format(item),
                    data, 'purge')
        logger.info('Purged %s', ', '.join(titles))
        return [PurgedPage(**item) for item in purged]

    def category_members(self, category, limit='max'):
        """Return the titles of the pages in Category:``category``."""
        return self.category(category).categorymembers(limit=limit)

    def _generate(self, params, path, what):
        """Centralize generation of API data.

        Follow ``continue`` until the wiki has nothing more and return
        every item of the list at ``path``, in order.
        """
        items = []
        last_cont = {}
        while 1:
            params.update(last_cont)
            data = self.request(**params)
            items.extend(narrow(data, path, list, what=what))
            if 'continue' not in data:
                break
            last_cont = narrow(data, ('continue',), what=what)
        return items

    def allusers(self, excludegroup='bot', limit='max', **evil):
        """Return the names of all users not in ``excludegroup``.

        Continues past ``limit`` until every user has been listed.
        """
        params = {
            'action': 'query',
            'list': 'allusers',
            'meta': 'userinfo',
            'auexcludegroup': excludegroup,
            'aulimit': limit,
        }
        params.update(evil)
        users = self._generate(params, ('query', 'allusers'), 'allusers')
        names = []
        for user in users:
            if not isinstance(user, dict):
                raise ProtocolError(
                    'allusers: unexpected user type: {!r}'.format(user),
                    users, 'query.allusers')
            name = user.get('name')
            if not isinstance(name, str):
                raise ProtocolError(
                    'allusers: unexpected user name type: {!r}'.format(user),
                    users, 'query.allusers.name')
            names.append(name)
        return names
