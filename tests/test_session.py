"""Unit tests for PlaySession."""

import unittest

from scramble.models import Assignment, AssignmentOptions, Result, SentenceWithOptions
from scramble.session import PlaySession, progress_storage_key


WORDS = ['We', 'will', 'pick up', 'the', 'kids']
CHUNKS = ['one', 'two', 'three', 'four five']


def make_assignment(attempts=3, reveal=True, **option_overrides) -> Assignment:
    options = AssignmentOptions(
        attempts_per_item=attempts,
        reveal_after_max=reveal,
        reveal_answer_after_max_attempts=reveal,
        **option_overrides
    )
    return Assignment('a1', 'Phrasal verbs', 1, 'seed', options, [
        SentenceWithOptions('We will pick up the kids', alts=['The kids we will pick up']),
        SentenceWithOptions('one two three four five', chunks=CHUNKS),
        SentenceWithOptions('Last one here'),
    ])


class TestUnits(unittest.TestCase):
    """Tests for scrambled units."""

    def test_seeded_units_are_stable(self):
        session = PlaySession(make_assignment(), 'Alice')
        other = PlaySession(make_assignment(), 'Bob')
        self.assertEqual(session.units(0), session.units(0))
        self.assertEqual(session.units(0), other.units(0))

    def test_units_cover_the_sentence(self):
        session = PlaySession(make_assignment(), 'Alice')
        self.assertEqual(sorted(w.text for w in session.units(0)), sorted(WORDS))
        self.assertEqual(sorted(w.text for w in session.units(1)), sorted(CHUNKS))

    def test_random_scramble_keeps_units(self):
        session = PlaySession(make_assignment(scramble='random'), 'Alice')
        self.assertEqual(sorted(w.text for w in session.units(0)), sorted(WORDS))

    def test_chunk_mode(self):
        session = PlaySession(make_assignment(), 'Alice')
        self.assertFalse(session.is_chunk_mode(0))
        self.assertTrue(session.is_chunk_mode(1))

    def test_bad_index(self):
        session = PlaySession(make_assignment(), 'Alice')
        with self.assertRaises(ValueError):
            session.units(3)
        with self.assertRaises(ValueError):
            session.units(-1)


class TestCheck(unittest.TestCase):
    """Tests for checking answers."""

    def test_correct_first_try(self):
        session = PlaySession(make_assignment(), 'Alice')
        outcome = session.check(0, WORDS)
        self.assertTrue(outcome.ok)
        self.assertTrue(outcome.finished)
        self.assertEqual(outcome.attempts, 1)
        self.assertEqual(outcome.message, 'Correct! Well done!')
        self.assertEqual(session.results, [Result(0, True, 1, False)])

    def test_alternative_answer_accepted(self):
        session = PlaySession(make_assignment(), 'Alice')
        outcome = session.check(0, ['The', 'kids', 'we', 'will', 'pick up'])
        self.assertTrue(outcome.ok)

    def test_wrong_answer_keeps_going(self):
        session = PlaySession(make_assignment(), 'Alice')
        outcome = session.check(0, ['kids', 'the', 'pick up', 'will', 'We'])
        self.assertFalse(outcome.ok)
        self.assertFalse(outcome.finished)
        self.assertEqual(outcome.message, 'Not quite. Try again.')
        self.assertIsNone(outcome.answer)
        self.assertEqual(session.attempts_used(0), 1)
        self.assertEqual(session.results, [])

    def test_no_feedback_message(self):
        session = PlaySession(make_assignment(feedback='none'), 'Alice')
        self.assertIsNone(session.check(0, ['kids']).message)

    def test_max_attempts_with_reveal(self):
        session = PlaySession(make_assignment(), 'Alice')
        for _ in range(2):
            session.check(0, ['wrong'])
        outcome = session.check(0, ['wrong'])
        self.assertTrue(outcome.finished)
        self.assertEqual(outcome.answer, 'We will pick up the kids')
        self.assertEqual(session.results, [Result(0, False, 3, True)])
        self.assertEqual(session.attempts_used(0), 0)

    def test_max_attempts_without_reveal(self):
        session = PlaySession(make_assignment(reveal=False), 'Alice')
        for _ in range(3):
            outcome = session.check(0, ['wrong'])
        self.assertTrue(outcome.finished)
        self.assertIsNone(outcome.answer)
        self.assertEqual(outcome.message, 'No attempts left for this sentence.')
        self.assertEqual(session.results, [Result(0, False, 3, False)])

    def test_unlimited_attempts(self):
        session = PlaySession(make_assignment(attempts='unlimited'), 'Alice')
        for _ in range(10):
            self.assertFalse(session.check(0, ['wrong']).finished)
        outcome = session.check(0, WORDS)
        self.assertTrue(outcome.ok)
        self.assertEqual(outcome.attempts, 11)

    def test_chunk_answers_ignore_case_and_padding(self):
        session = PlaySession(make_assignment(), 'Alice')
        self.assertTrue(session.check(1, [' ONE', 'two ', 'Three', 'four five']).ok)

    def test_chunk_order_matters(self):
        session = PlaySession(make_assignment(), 'Alice')
        self.assertFalse(session.check(1, ['two', 'one', 'three', 'four five']).ok)

    def test_recorded_sentence_cannot_be_checked_again(self):
        session = PlaySession(make_assignment(), 'Alice')
        session.check(0, WORDS)
        with self.assertRaises(ValueError):
            session.check(0, WORDS)
        with self.assertRaises(ValueError):
            session.reveal(0)


class TestRevealAndProgress(unittest.TestCase):
    """Tests for reveal, summaries and saved progress."""

    def test_reveal(self):
        session = PlaySession(make_assignment(), 'Alice')
        session.check(1, ['wrong'])
        outcome = session.reveal(1)
        self.assertEqual(outcome.answer, 'one two three four five')
        self.assertEqual(session.results, [Result(1, False, 1, True)])

    def test_next_index_and_completion(self):
        session = PlaySession(make_assignment(), 'Alice')
        self.assertEqual(session.next_index, 0)
        session.check(0, WORDS)
        session.reveal(1)
        self.assertEqual(session.next_index, 2)
        self.assertFalse(session.is_complete)
        session.check(2, ['Last', 'one', 'here'])
        self.assertIsNone(session.next_index)
        self.assertTrue(session.is_complete)

    def test_summary(self):
        session = PlaySession(make_assignment(), 'Alice')
        session.check(0, WORDS)
        session.reveal(1)
        self.assertEqual(session.summary.to_dict(), {
            'total': 2, 'solvedWithinMax': 1, 'firstTry': 1, 'reveals': 1, 'avgAttempts': 1.0,
        })

    def test_progress_records_pending_attempts(self):
        session = PlaySession(make_assignment(), 'Alice')
        session.check(0, WORDS)
        session.check(1, ['wrong'])
        progress = session.to_progress().to_dict()
        self.assertEqual(progress['assignmentId'], 'a1')
        self.assertEqual(progress['student'], {'name': 'Alice'})
        self.assertEqual(progress['current'], {'index': 1, 'attemptsUsed': 1, 'revealed': False})
        self.assertEqual(len(progress['results']), 1)

    def test_resume_from_progress(self):
        session = PlaySession(make_assignment(), 'Alice')
        session.check(0, WORDS)
        session.check(1, ['wrong'])
        resumed = PlaySession(make_assignment(), 'Alice', session.to_progress())
        self.assertTrue(resumed.is_recorded(0))
        self.assertEqual(resumed.attempts_used(1), 1)
        self.assertEqual(resumed.check(1, CHUNKS).attempts, 2)

    def test_storage_key(self):
        self.assertEqual(progress_storage_key('a1', 'Alice'), 'ss::a1::Alice')
        self.assertEqual(PlaySession(make_assignment(), 'Alice').storage_key, 'ss::a1::Alice')


if __name__ == '__main__':
    unittest.main()
