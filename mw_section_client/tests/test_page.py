"""Test various aspects of Pages."""
from unittest import TestCase
import mw_section_client as mw
from .fakes import FakeSession, FakeResponse
from .test_wiki import ENDPOINT, login_responses

MARKUP = "* Some paper, 2019\n* Another paper, 2020"

def parsed(*sections):
    """An action=parse&prop=sections response."""
    return {'parse': {'title': 'User:Ihar', 'pageid': 12, 'sections': [
        {'toclevel': 1, 'level': level, 'line': line, 'number': str(i),
         'index': index, 'fromtitle': 'User:Ihar', 'byteoffset': 0,
         'anchor': line.replace(' ', '_')}
        for i, (index, level, line) in enumerate(sections, 1)
    ]}}

def csrf_response():
    """A CSRF token response that sets cookies of its own."""
    return FakeResponse({'query': {'tokens': {'csrftoken': 'CSRF+\\'}}},
                        cookies={'wiki_session': 'from-csrf'})

def edit_response(result='Success'):
    """An action=edit response."""
    return {'edit': {'result': result, 'pageid': 12, 'title': 'User:Ihar',
                     'contentmodel': 'wikitext', 'oldrevid': 40,
                     'newrevid': 41, 'newtimestamp': '2026-10-18T12:00:00Z'}}

class TestSections(TestCase):
    """Test Page.sections and Page.section_index."""
    def test_sections(self):
        """Assert sections come back as Sections with string levels."""
        session = FakeSession(parsed(('1', '2', 'Biography'),
                                     ('2', 3, 'Early life')))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        sections = page.sections()
        self.assertEqual([s.line for s in sections],
                         ['Biography', 'Early life'])
        self.assertEqual(sections[1].level, '3')
        self.assertEqual(session.requests[0][2]['prop'], 'sections')
        self.assertEqual(session.requests[0][2]['page'], 'User:Ihar')

    def test_absent_section_is_new(self):
        """Assert a heading that is not there gives 'new'."""
        session = FakeSession(parsed(('1', '2', 'Biography'),
                                     ('2', '2', 'Links')))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertEqual(page.section_index('Publications'), mw.NEW_SECTION)

    def test_only_level_2_matches(self):
        """Assert a level-3 heading with the same text does not match."""
        session = FakeSession(parsed(('1', '2', 'Biography'),
                                     ('2', '3', 'Publications')))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertEqual(page.section_index('Publications'), 'new')

    def test_exact_match_only(self):
        """Assert headings must match exactly."""
        session = FakeSession(parsed(('1', '2', 'publications'),
                                     ('2', '2', 'Publications ')))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertEqual(page.section_index('Publications'), 'new')

    def test_present_section(self):
        """Assert a matching level-2 heading gives its index."""
        session = FakeSession(parsed(('1', '2', 'Biography'),
                                     ('2', '3', 'Early life'),
                                     ('3', '2', 'Publications')))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertEqual(page.section_index('Publications'), '3')

    def test_last_match_wins(self):
        """Assert the last of several matching headings is used."""
        session = FakeSession(parsed(('2', '2', 'Publications'),
                                     ('5', '2', 'Publications')))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertEqual(page.section_index('Publications'), '5')

    def test_missing_page(self):
        """Assert a page that does not exist has no sections."""
        session = FakeSession({'error': {
            'code': 'missingtitle',
            'info': "The page you specified doesn't exist."}})
        page = mw.Wiki(ENDPOINT, session=session).page('User:Nobody')
        self.assertEqual(page.section_index('Publications'), 'new')

    def test_other_errors_propagate(self):
        """Assert errors other than a missing page are raised."""
        session = FakeSession({'error': {'code': 'invalidtitle',
                                         'info': 'Bad title'}})
        page = mw.Wiki(ENDPOINT, session=session).page('<>')
        self.assertRaises(mw.APIError, page.sections)

    def test_malformed_sections(self):
        """Assert a sections list of the wrong shape is a ProtocolError."""
        for payload in ({'parse': {}}, {'parse': {'sections': {}}},
                        {'parse': {'sections': [{'line': 'x'}]}}):
            page = mw.Wiki(ENDPOINT, session=FakeSession(payload)).page('X')
            self.assertRaises(mw.ProtocolError, page.sections)

class TestEditSection(TestCase):
    """Test Page.edit_section, the whole edit workflow."""
    def run_edit(self, sections, edit=None):
        """Edit User:Ihar's Publications section against canned answers."""
        session = FakeSession(sections, *login_responses(),
                              csrf_response(), edit or edit_response())
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        result = page.edit_section(MARKUP, 'Publications',
                                   'PublicationsBot', 'secret')
        return session, result

    def test_new_section(self):
        """Assert an absent section is added with the markup verbatim."""
        session, result = self.run_edit(parsed(('1', '2', 'Biography')))
        self.assertTrue(result)
        self.assertEqual(result.newrevid, 41)
        params = session.requests[-1][2]
        self.assertEqual(params['action'], 'edit')
        self.assertEqual(params['section'], 'new')
        self.assertEqual(params['sectiontitle'], 'Publications')
        self.assertEqual(params['text'], MARKUP)

    def test_existing_section(self):
        """Assert an existing section is replaced, heading and all."""
        session, _ = self.run_edit(parsed(('1', '2', 'Biography'),
                                          ('3', '2', 'Publications')))
        params = session.requests[-1][2]
        self.assertEqual(params['section'], '3')
        self.assertEqual(params['text'], '== Publications ==\n\n' + MARKUP)

    def test_edit_request(self):
        """Assert the edit is one POST with the login cookies and the
        CSRF token fetched with them.
        """
        session, _ = self.run_edit(parsed())
        self.assertEqual([r[0] for r in session.requests],
                         ['GET', 'POST', 'POST', 'POST', 'POST'])
        csrf_req, edit_req = session.requests[3], session.requests[4]
        self.assertEqual(csrf_req[2]['type'], 'csrf')
        self.assertEqual(csrf_req[3]['Cookie'],
                         'wiki_session=authed; wikiUserName=PublicationsBot')
        params, headers = edit_req[2], edit_req[3]
        self.assertEqual(params['bot'], 1)
        self.assertEqual(params['title'], 'User:Ihar')
        self.assertEqual(params['contentmodel'], 'wikitext')
        self.assertEqual(params['token'], 'CSRF+\\')
        self.assertIn('wiki_session=authed', headers['Cookie'])
        self.assertNotIn('from-csrf', headers['Cookie'])

    def test_login_failure_stops(self):
        """Assert nothing is submitted when the login fails."""
        session = FakeSession(parsed(), *login_responses('Failed'))
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertRaises(mw.AuthError, page.edit_section,
                          MARKUP, 'Publications', 'PublicationsBot', 'bad')
        self.assertEqual(len(session.requests), 3)

    def test_csrf_failure_stops(self):
        """Assert nothing is submitted when no CSRF token comes back."""
        session = FakeSession(parsed(), *login_responses(),
                              {'query': {'tokens': {'csrftoken': ''}}})
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertRaises(mw.ProtocolError, page.edit_section,
                          MARKUP, 'Publications', 'PublicationsBot', 'x')
        self.assertEqual(len(session.requests), 4)

    def test_token_from_other_session(self):
        """Assert the wiki's badtoken answer surfaces as an EditError."""
        with self.assertRaises(mw.EditError) as ctx:
            self.run_edit(parsed(), {'error': {
                'code': 'badtoken', 'info': 'Invalid CSRF token.'}})
        self.assertEqual(ctx.exception.code, 'badtoken')

    def test_edit_failure_result(self):
        """Assert a result other than Success is an EditError."""
        self.assertRaises(mw.EditError, self.run_edit, parsed(),
                          edit_response('Failure'))

    def test_edit_missing(self):
        """Assert a response without an edit object is a ProtocolError."""
        self.assertRaises(mw.ProtocolError, self.run_edit, parsed(),
                          {'batchcomplete': ''})
        self.assertRaises(mw.ProtocolError, self.run_edit, parsed(),
                          {'edit': 'Success'})
        self.assertRaises(mw.ProtocolError, self.run_edit, parsed(),
                          {'edit': {'title': 'User:Ihar'}})

    def test_edit_bad_status(self):
        """Assert a status above 200 on the edit is a TransportError."""
        self.assertRaises(mw.TransportError, self.run_edit, parsed(),
                          FakeResponse(edit_response(), status=201))

    def test_nochange(self):
        """Assert a null edit is reported, not hidden."""
        edit = edit_response()
        edit['edit']['nochange'] = ''
        _, result = self.run_edit(parsed(), edit)
        self.assertTrue(result.nochange)

    def test_update_page(self):
        """Assert Wiki.update_page runs the same workflow."""
        session = FakeSession(parsed(('3', '2', 'Publications')),
                              *login_responses(), csrf_response(),
                              edit_response())
        wiki = mw.Wiki(ENDPOINT, session=session)
        result = wiki.update_page('User:Ihar', MARKUP, 'wikitext',
                                  'PublicationsBot', 'secret', 'Publications')
        self.assertTrue(result)
        self.assertEqual(session.requests[-1][2]['section'], '3')

class TestReaders(TestCase):
    """Test the per-page readers."""
    def test_externallinks(self):
        """Assert external links come back as a list of URLs."""
        session = FakeSession({'parse': {'title': 'User:Ihar', 'externallinks': [
            'https://doi.org/10.1000/1', 'https://example.org/paper.pdf',
        ]}})
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertEqual(page.externallinks(), [
            'https://doi.org/10.1000/1', 'https://example.org/paper.pdf'])
        self.assertEqual(session.requests[0][2]['prop'], 'externallinks')

    def test_purge(self):
        """Assert Page.purge purges just this page."""
        session = FakeSession({'purge': [
            {'ns': 2, 'title': 'User:Ihar', 'purged': ''}]})
        page = mw.Wiki(ENDPOINT, session=session).page('User:Ihar')
        self.assertTrue(page.purge().purged)
        self.assertEqual(session.requests[0][2]['titles'], 'User:Ihar')

    def test_externallinks_bad_shape(self):
        """Assert links that are not strings are ProtocolErrors."""
        for payload in ({'parse': {}},
                        {'parse': {'externallinks': 'https://a'}},
                        {'parse': {'externallinks': [5, None, 'https://a']}}):
            page = mw.Wiki(ENDPOINT, session=FakeSession(payload)).page('X')
            with self.assertRaises(mw.ProtocolError) as ctx:
                page.externallinks()
            self.assertEqual(ctx.exception.path, 'parse.externallinks')
