"""Tests for the sentence scramble HTTP API."""

import unittest

from fastapi.testclient import TestClient

import server.app as server_app
from scramble.interfaces import Storage
from scramble.session import progress_storage_key


WORDS = ['We', 'will', 'pick up', 'the', 'kids']


# ============================================================================
# Mock Implementations
# ============================================================================

class MockStorage(Storage):
    """In-memory storage for testing."""

    def __init__(self):
        self.progress = {}
        self.draft = None
        self.history = []
        self.save_calls = []

    def load_progress(self, key: str) -> dict | None:
        return self.progress.get(key)

    def save_progress(self, key: str, progress: dict) -> None:
        self.save_calls.append(key)
        self.progress[key] = progress

    def clear_progress(self, key: str) -> bool:
        return self.progress.pop(key, None) is not None

    def list_progress_keys(self, assignment_id: str) -> list[str]:
        prefix = progress_storage_key(assignment_id, '')
        return sorted(k for k in self.progress if k.startswith(prefix))

    def load_teacher_draft(self) -> dict | None:
        return self.draft

    def save_teacher_draft(self, draft: dict) -> None:
        self.draft = draft

    def load_share_history(self) -> list[dict]:
        return self.history

    def save_share_history(self, entries: list[dict]) -> None:
        self.history = entries[:10]


class APITestCase(unittest.TestCase):

    def setUp(self):
        self.storage = MockStorage()
        server_app.storage = self.storage
        server_app.play_sessions.clear()
        self.client = TestClient(server_app.create_app())

    def create_assignment(self, **overrides) -> dict:
        payload = {
            'title': 'Phrasal verbs',
            'sentences': 'We will pick up the kids\nShe sings beautifully.',
            'base_url': 'https://example.com/',
        }
        payload.update(overrides)
        response = self.client.post('/api/assignments', json=payload)
        self.assertEqual(response.status_code, 200)
        return response.json()


# ============================================================================
# Authoring endpoints
# ============================================================================

class TestAuthoring(APITestCase):
    """Tests for the teacher-facing endpoints."""

    def test_health(self):
        response = self.client.get('/')
        self.assertEqual(response.json(), {'status': 'ok', 'service': 'sentence-scramble'})

    def test_split(self):
        response = self.client.post('/api/sentences/split', json={'text': 'One here. Two there.'})
        self.assertEqual(response.json(), {'items': [{'text': 'One here.'}, {'text': 'Two there.'}]})

    def test_chunk(self):
        sentence = ('For mums and dads who drop their kids off at the school gates, '
                    'making friends can be just as hard in the morning.')
        response = self.client.post('/api/sentences/chunk', json={'sentence': sentence})
        self.assertEqual(len(response.json()['chunks']), 5)

    def test_create_assignment(self):
        data = self.create_assignment()
        self.assertEqual(data['prefix'], '#C=')
        self.assertEqual(data['link'], 'https://example.com/#C=' + data['hash'])
        self.assertEqual(data['qr_file_name'], 'phrasal-verbs-qr.png')
        self.assertIn(data['link'], data['instructions'])
        self.assertEqual(len(data['assignment']['sentences']), 2)

    def test_create_records_share_history(self):
        first = self.create_assignment(title='First')
        self.create_assignment(title='Second')
        entries = self.client.get('/api/share-history').json()['entries']
        self.assertEqual([e['title'] for e in entries], ['Second', 'First'])
        self.assertEqual(entries[1]['link'], first['link'])

    def test_create_rejects_bad_input(self):
        response = self.client.post('/api/assignments', json={'title': '', 'sentences': 'Hi.'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['detail'], 'Please provide a title.')
        response = self.client.post('/api/assignments', json={
            'title': 'T', 'sentences': 'Hi.', 'attempts_per_item': 'zero'})
        self.assertEqual(response.status_code, 400)

    def test_parse(self):
        data = self.create_assignment()
        response = self.client.get('/api/assignments/parse', params={'fragment': data['link']})
        self.assertEqual(response.json(), data['assignment'])

    def test_parse_invalid(self):
        response = self.client.get('/api/assignments/parse', params={'fragment': '#C=garbage'})
        self.assertEqual(response.status_code, 404)

    def test_draft(self):
        self.assertEqual(self.client.get('/api/teacher/draft').json(), {'draft': None})
        self.client.put('/api/teacher/draft', json={'title': 'Unit 1', 'sentences': 'Hi.'})
        draft = self.client.get('/api/teacher/draft').json()['draft']
        self.assertEqual(draft['title'], 'Unit 1')
        self.assertEqual(draft['attemptsPerItem'], '3')
        self.assertTrue(draft['instructionsTemplate'])


# ============================================================================
# Play endpoints
# ============================================================================

class TestPlay(APITestCase):
    """Tests for the student-facing endpoints."""

    def setUp(self):
        super().setUp()
        self.link = self.create_assignment()['link']

    def assignment_id(self) -> str:
        return self.client.get('/api/assignments/parse', params={'fragment': self.link}).json()['id']

    def check(self, index, answer, student='Alice'):
        return self.client.post('/api/play/check', json={
            'fragment': self.link, 'index': index, 'answer': answer, 'student': student})

    def test_units(self):
        response = self.client.get('/api/play/units', params={
            'fragment': self.link, 'index': 0, 'student': 'Alice'})
        data = response.json()
        self.assertEqual(data['total'], 2)
        self.assertFalse(data['chunk_mode'])
        self.assertEqual(sorted(u['text'] for u in data['units']), sorted(WORDS))
        self.assertFalse(data['recorded'])

    def test_units_bad_index(self):
        response = self.client.get('/api/play/units', params={'fragment': self.link, 'index': 9})
        self.assertEqual(response.status_code, 400)

    def test_check_correct(self):
        data = self.check(0, WORDS).json()
        self.assertTrue(data['ok'])
        self.assertEqual(data['next_index'], 1)
        self.assertFalse(data['complete'])
        self.assertEqual(data['summary']['firstTry'], 1)
        self.assertEqual(self.storage.save_calls, [progress_storage_key(self.assignment_id(), 'Alice')])

    def test_wrong_attempts_are_saved(self):
        self.check(0, ['kids'])
        progress = self.client.get('/api/progress', params={
            'fragment': self.link, 'student': 'Alice'}).json()
        self.assertEqual(progress['current'], {'index': 0, 'attemptsUsed': 1, 'revealed': False})

    def test_attempts_survive_restart(self):
        self.check(0, ['kids'])
        server_app.play_sessions.clear()
        data = self.check(0, WORDS).json()
        self.assertEqual(data['attempts'], 2)

    def test_reveal_and_complete(self):
        self.check(0, WORDS)
        data = self.client.post('/api/play/reveal', json={
            'fragment': self.link, 'index': 1, 'student': 'Alice'}).json()
        self.assertEqual(data['answer'], 'She sings beautifully.')
        self.assertTrue(data['complete'])
        self.assertIsNone(data['next_index'])
        self.assertEqual(data['summary']['reveals'], 1)

    def test_check_twice_is_rejected(self):
        self.check(0, WORDS)
        self.assertEqual(self.check(0, WORDS).status_code, 400)

    def test_students_are_separate(self):
        self.check(0, WORDS, student='Alice')
        data = self.check(0, ['kids'], student='Bob').json()
        self.assertEqual(data['attempts'], 1)
        self.assertFalse(data['finished'])

    def test_list_students(self):
        self.check(0, WORDS, student='Alice')
        self.check(0, ['kids'], student='Bob')
        students = self.client.get(
            f'/api/assignments/{self.assignment_id()}/students').json()['students']
        self.assertEqual([s['student'] for s in students], ['Alice', 'Bob'])
        self.assertEqual([s['completed'] for s in students], [1, 0])

    def test_list_students_skips_unreadable_records(self):
        self.check(0, WORDS, student='Alice')
        self.storage.progress[progress_storage_key(self.assignment_id(), 'Bob')] = {'results': []}
        with self.assertLogs('server.app', level='WARNING'):
            response = self.client.get(f'/api/assignments/{self.assignment_id()}/students')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([s['student'] for s in response.json()['students']], ['Alice'])

    def test_progress_missing(self):
        response = self.client.get('/api/progress', params={'fragment': self.link, 'student': 'Zed'})
        self.assertEqual(response.status_code, 404)

    def test_delete_progress(self):
        self.check(0, WORDS)
        response = self.client.delete('/api/progress', params={
            'fragment': self.link, 'student': 'Alice'})
        self.assertEqual(response.json(), {'deleted': True})
        data = self.client.get('/api/play/units', params={
            'fragment': self.link, 'index': 0, 'student': 'Alice'}).json()
        self.assertFalse(data['recorded'])

    def test_progress_from_other_version_is_discarded(self):
        key = progress_storage_key(self.assignment_id(), 'Alice')
        self.storage.progress[key] = {
            'assignmentId': self.assignment_id(),
            'version': 99,
            'student': {'name': 'Alice'},
            'summary': {},
            'results': [{'index': 0, 'ok': True, 'attempts': 1, 'revealed': False}],
        }
        data = self.client.get('/api/play/units', params={
            'fragment': self.link, 'index': 0, 'student': 'Alice'}).json()
        self.assertFalse(data['recorded'])


if __name__ == '__main__':
    unittest.main()
