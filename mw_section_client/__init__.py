"""
A small MediaWiki API client for bots that keep one section of a page
up to date.

It logs a bot account in, finds a level-2 section by its heading and
replaces (or appends) it in a single edit. It can also purge pages and
list category members, users and a page's external links.

Requires the ``requests`` library.

http://www.mediawiki.org/

Installation
============

From a checkout of the source::

    pip install -e .

With the test dependencies::

    pip install -e .[test]

Example Usage
=============

.. code-block:: python

    import mw_section_client as mw

Point it at a wiki (the directory holding api.php):

.. code-block:: python

    wiki = mw.Wiki("https://wiki.example.org/w", "PublicationsBot/1.0")

Replace the "Publications" section of a user page, or add it if the page
does not have one yet:

.. code-block:: python

    page = wiki.page("User:Ihar")
    page.edit_section(markup, "Publications", "PublicationsBot", password)

Or in one call:

.. code-block:: python

    wiki.update_page("User:Ihar", markup, "wikitext",
                     "PublicationsBot", password, "Publications")

Log in yourself and reuse the session:

.. code-block:: python

    login = wiki.login("PublicationsBot", password)
    token, _ = wiki.meta.tokens("csrf", login.cookies)

Purge pages:

.. code-block:: python

    wiki.purge("User:Ihar", "Main Page")

Read things:

.. code-block:: python

    wiki.category_members("Researchers")
    wiki.allusers()
    wiki.page("User:Ihar").externallinks()

Nothing is cached and nothing is retried. Every edit logs in again and
fetches a fresh token.

MIT Licensed.
"""
import logging

__version__ = '1.0.0'

USER_AGENT = "mw_section_client/" + __version__ + ", python-requests"
CONTENT_MODEL = 'wikitext'

from .wiki import Wiki # pylint: disable=wrong-import-position
from .page import Page # pylint: disable=wrong-import-position
from .excs import * # pylint: disable=wrong-import-position
from .misc import * # pylint: disable=wrong-import-position

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'USER_AGENT',
    'CONTENT_MODEL',
    'Wiki',
    'Page',
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
    'Meta',
    'Section',
    'LoginResult',
    'EditResult',
    'PurgedPage',
    'NEW_SECTION',
    'TOKEN_KINDS',
]
