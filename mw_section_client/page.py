"""
This submodule contains the Page object.
"""
import logging
from .excs import APIError, EditError, ProtocolError, coded
from .misc import Section, EditResult, NEW_SECTION, narrow
from . import CONTENT_MODEL

__all__ = [
    'Page',
]

logger = logging.getLogger(__name__)

class Page(object):
    """The class for a page on a wiki.

    Must be initialized with a Wiki instance.
    """
    def __init__(self, wiki, title=None, **data):
        """Initialize a page with its wiki and title."""
        self.wiki = wiki
        self.title = title
        self.__dict__.update(data)

    def __repr__(self):
        """Represent a page instance."""
        return "<Page {name}>".format(name=self.title)

    def __eq__(self, other):
        """Check if two pages are the same."""
        return self.title == other.title

    def __hash__(self):
        """Page.__hash__() <==> hash(Page)"""
        return hash(self.title)

    __str__ = __repr__

    def sections(self):
        """Return the page's table of contents as a list of Sections.

        A page that does not exist has no sections.
        """
        params = {
            'action': 'parse',
            'page': self.title,
            'prop': 'sections',
        }
        try:
            data = self.wiki.request(**params)
        except APIError as exc:
            if exc.code != 'missingtitle':
                raise
            return []
        sections = narrow(data, ('parse', 'sections'), list,
                          what='sections')
        result = []
        for section in sections:
            if not isinstance(section, dict) \
                    or not {'index', 'line', 'level'} <= section.keys():
                raise ProtocolError(
                    'sections: unexpected section: {!r}'.format(section),
                    data, 'parse.sections')
            result.append(Section(**section))
        return result

    def section_index(self, section_title):
        """Return the index of the level-2 section whose heading is
        exactly ``section_title``, or NEW_SECTION if there is none.

        Every section is looked at, so if the heading appears more
        than once the last one wins.
        """
        index = NEW_SECTION
        for section in self.sections():
            if section.level == '2' and section.line == section_title:
                index = section.index
        return index

    #pylint: disable=too-many-arguments
    def edit_section(self, markup, section_title, username, password,
                     contentmodel=CONTENT_MODEL, summary=None):
        """Put ``markup`` into the level-2 section ``section_title``,
        creating the section (and the page) if needed.

        Logs in as ``username`` for this edit only, fetches a CSRF
        token bound to that login and submits one action=edit.
        Returns the EditResult; raises AuthError, EditError,
        ProtocolError, TransportError or DecodeError otherwise.
        Nothing is retried.
        """
        section = self.section_index(section_title)

        # editing an existing section by index replaces its heading too
        if section != NEW_SECTION:
            markup = "== {} ==\n\n{}".format(section_title, markup)

        login = self.wiki.login(username, password)
        token, _ = self.wiki.meta.tokens('csrf', login.cookies)

        params = {
            'action': "edit",
            'bot': 1,
            'title': self.title,
            'section': section,
            'sectiontitle': section_title,
            'text': markup,
            'contentmodel': contentmodel,
            'summary': summary,
            'token': token,
        }
        data = self.wiki.request(_post=True, _cookies=login.cookies,
                                 _error=EditError, **params)

        edit = narrow(data, ('edit',), what='edit')
        if 'result' not in edit:
            raise ProtocolError(
                'edit: missing edit.result: {!r}'.format(data),
                data, 'edit.result')
        if edit['result'] != 'Success':
            raise coded(EditError, edit['result'])(
                'edit: {} on {}: {!r}'.format(
                    edit['result'], self.title, data), data)

        result = EditResult(**edit)
        logger.info('Edited %s section %s (r%s%s)', self.title, section,
                    result.newrevid, ', no change' if result.nochange else '')
        return result

    def externallinks(self):
        """Return the external links used on this page."""
        params = {
            'action': 'parse',
            'page': self.title,
            'prop': 'externallinks',
        }
        data = self.wiki.request(**params)
        links = narrow(data, ('parse', 'externallinks'), list,
                       what='externallinks')
        for link in links:
            if not isinstance(link, str):
                raise ProtocolError(
                    'externallinks: unexpected link type: {!r}'.format(link),
                    data, 'parse.externallinks')
        return links

    def categorymembers(self, limit="max", namespace=None, **evil):
        """Return the titles of the pages in this category.

        Continues past ``limit`` until every member has been listed.
        """
        params = {
            'action': 'query',
            'list': 'categorymembers',
            'cmtitle': self.title,
            'cmlimit': limit,
            'cmnamespace': namespace,
        }
        params.update(evil)
        # pylint: disable=protected-access
        members = self.wiki._generate(params, ('query', 'categorymembers'),
                                      'categorymembers')
        titles = []
        for member in members:
            if not isinstance(member, dict) \
                    or not isinstance(member.get('title'), str):
                raise ProtocolError(
                    'categorymembers: unexpected member: {!r}'.format(member),
                    members, 'query.categorymembers.title')
            titles.append(member['title'])
        return titles

    def purge(self):
        """Purge the cache of this page, forcing a re-parse of the contents."""
        return self.wiki.purge(self.title)[0]
