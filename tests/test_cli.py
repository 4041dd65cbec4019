"""Tests for the console client."""

import unittest
from unittest.mock import MagicMock, patch

from cli.console import ConsoleUI, parse_order


UNITS = [{'id': '1-there', 'text': 'there'}, {'id': '0-Hi', 'text': 'Hi'}, {'id': '2-!', 'text': '!'}]


class TestParseOrder(unittest.TestCase):
    """Tests for parse_order."""

    def test_spaces_and_commas(self):
        self.assertEqual(parse_order('2 1 3', UNITS), ['Hi', 'there', '!'])
        self.assertEqual(parse_order('2,1, 3', UNITS), ['Hi', 'there', '!'])

    def test_rejects_non_permutations(self):
        self.assertIsNone(parse_order('1 2', UNITS))
        self.assertIsNone(parse_order('1 1 2', UNITS))
        self.assertIsNone(parse_order('0 1 2', UNITS))
        self.assertIsNone(parse_order('a b c', UNITS))
        self.assertIsNone(parse_order('', UNITS))


class TestConsoleUI(unittest.TestCase):
    """Tests for the play loop against a mocked API client."""

    def setUp(self):
        self.client = MagicMock()
        self.client.base_url = 'http://localhost:8000'
        self.client.health_check.return_value = {'status': 'ok', 'service': 'sentence-scramble'}
        self.client.parse_assignment.return_value = {
            'title': 'Greetings', 'sentences': [{'text': 'Hi there !'}]}
        self.client.get_progress.return_value = None
        self.client.get_units.return_value = {
            'index': 0, 'total': 1, 'units': UNITS, 'chunk_mode': False,
            'attempts_used': 0, 'recorded': False,
        }
        self.summary = {'total': 1, 'solvedWithinMax': 1, 'firstTry': 0, 'reveals': 0, 'avgAttempts': 2}
        self.ui = ConsoleUI(self.client, '#C=abc')

    def outcome(self, ok, finished, **extra):
        data = {
            'ok': ok, 'attempts': 1, 'finished': finished, 'answer': None, 'message': None,
            'summary': self.summary, 'next_index': None if finished else 0, 'complete': finished,
        }
        data.update(extra)
        return data

    def test_solves_after_retry(self):
        self.client.check.side_effect = [
            self.outcome(False, False, message='Not quite. Try again.'),
            self.outcome(True, True, attempts=2, message='Correct! Well done!'),
        ]
        with patch('builtins.input', side_effect=['1 2 3', '5', '2 1 3']), patch('builtins.print'):
            self.ui.run()
        self.assertEqual(self.client.check.call_count, 2)
        self.client.check.assert_called_with('#C=abc', 0, ['Hi', 'there', '!'])

    def test_reveal(self):
        self.client.reveal.return_value = self.outcome(False, True, answer='Hi there !')
        with patch('builtins.input', side_effect=['reveal']), patch('builtins.print'):
            self.ui.run()
        self.client.reveal.assert_called_once_with('#C=abc', 0)
        self.client.check.assert_not_called()

    def test_exit(self):
        with patch('builtins.input', side_effect=['status', 'exit']), patch('builtins.print'):
            self.ui.run()
        self.client.check.assert_not_called()

    def test_restart_resets_progress(self):
        with patch('builtins.input', side_effect=['exit']), patch('builtins.print'):
            self.ui.run(restart=True)
        self.client.reset_progress.assert_called_once_with('#C=abc')

    def test_server_down(self):
        self.client.health_check.side_effect = ConnectionError('refused')
        with patch('builtins.print') as mock_print:
            self.ui.run()
        self.client.parse_assignment.assert_not_called()
        self.assertIn('Cannot connect', mock_print.call_args_list[0].args[0])


if __name__ == '__main__':
    unittest.main()
