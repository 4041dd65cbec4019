"""A student's pass through one assignment."""

from .config import STORAGE_KEY_PREFIX
from .chunking import build_units, make_words
from .models import Assignment, Result, StudentProgress, Word
from .prng import seeded_shuffle, random_seed
from .summary import compute_summary


def progress_storage_key(assignment_id: str, student_name: str) -> str:
    return f'{STORAGE_KEY_PREFIX}::{assignment_id}::{student_name}'


def _squash(text: str) -> str:
    return ' '.join(text.split())


class CheckOutcome:
    """What the student sees after submitting an order."""

    def __init__(self, ok: bool, attempts: int, finished: bool,
                 answer: str | None = None, message: str | None = None):
        self.ok = ok
        self.attempts = attempts
        self.finished = finished
        self.answer = answer
        self.message = message

    def to_dict(self) -> dict:
        return {
            'ok': self.ok,
            'attempts': self.attempts,
            'finished': self.finished,
            'answer': self.answer,
            'message': self.message,
        }


class PlaySession:
    """Tracks attempts and results while a student works through an assignment.

    Results are append-only: once a sentence has a result it cannot be
    checked or revealed again.
    """

    def __init__(self, assignment: Assignment, student_name: str,
                 progress: StudentProgress = None):
        self.assignment = assignment
        self.student_name = student_name
        self.results: list[Result] = []
        self._attempts: dict[int, int] = {}
        if progress is not None:
            self.results = list(progress.results)
            current = progress.current or {}
            if current.get('attemptsUsed') and current.get('index') is not None:
                self._attempts[int(current['index'])] = int(current['attemptsUsed'])

    @property
    def options(self):
        return self.assignment.options

    @property
    def storage_key(self) -> str:
        return progress_storage_key(self.assignment.id, self.student_name)

    def _sentence(self, index: int):
        if not 0 <= index < len(self.assignment.sentences):
            raise ValueError(f"No sentence at index {index}")
        return self.assignment.sentences[index]

    def _recorded(self) -> set[int]:
        return {r.index for r in self.results}

    def is_recorded(self, index: int) -> bool:
        return index in self._recorded()

    def attempts_used(self, index: int) -> int:
        return self._attempts.get(index, 0)

    def is_chunk_mode(self, index: int) -> bool:
        return build_units(self._sentence(index))[1]

    def units(self, index: int) -> list[Word]:
        """Scrambled units for a sentence."""
        units, _ = build_units(self._sentence(index))
        words = make_words(units)
        if self.options.scramble == 'seeded':
            seed = f'{self.assignment.seed}-{index}'
        else:
            seed = random_seed()
        return seeded_shuffle(words, seed)

    def is_correct(self, index: int, answer: list[str]) -> bool:
        sentence = self._sentence(index)
        units, chunk_mode = build_units(sentence)
        if chunk_mode:
            given = [a.strip().lower() for a in answer]
            expected = [u.strip().lower() for u in units]
            return given == expected
        attempt = _squash(' '.join(answer))
        accepted = [sentence.text] + list(sentence.alts or [])
        return any(attempt == _squash(a) for a in accepted)

    def check(self, index: int, answer: list[str]) -> CheckOutcome:
        """Check an ordering; records a result when the item is finished."""
        sentence = self._sentence(index)
        if self.is_recorded(index):
            raise ValueError(f"Sentence {index} already has a result")

        attempts = self._attempts.get(index, 0) + 1
        self._attempts[index] = attempts
        ok = self.is_correct(index, answer)

        max_attempts = self.options.max_attempts
        finished = ok or (max_attempts is not None and attempts >= max_attempts)
        if not finished:
            message = None
            if self.options.feedback == 'show-on-wrong':
                message = 'Not quite. Try again.'
            return CheckOutcome(False, attempts, False, message=message)

        revealed = not ok and self.options.reveals_after_max
        self.results.append(Result(index, ok, attempts, revealed))
        del self._attempts[index]

        if ok:
            return CheckOutcome(True, attempts, True, answer=sentence.text,
                                message='Correct! Well done!')
        if revealed:
            return CheckOutcome(False, attempts, True, answer=sentence.text,
                                message=f'Not quite. The correct answer is: "{sentence.text}"')
        return CheckOutcome(False, attempts, True, message='No attempts left for this sentence.')

    def reveal(self, index: int) -> CheckOutcome:
        """Give up on a sentence and show its answer."""
        sentence = self._sentence(index)
        if self.is_recorded(index):
            raise ValueError(f"Sentence {index} already has a result")
        attempts = self._attempts.pop(index, 0)
        self.results.append(Result(index, False, attempts, True))
        return CheckOutcome(False, attempts, True, answer=sentence.text,
                            message=f'The correct answer is: "{sentence.text}"')

    @property
    def next_index(self) -> int | None:
        """First sentence without a result, None when everything is done."""
        recorded = self._recorded()
        for index in range(len(self.assignment.sentences)):
            if index not in recorded:
                return index
        return None

    @property
    def is_complete(self) -> bool:
        return self.next_index is None

    @property
    def summary(self):
        return compute_summary(self.results, self.options.max_attempts)

    def to_progress(self) -> StudentProgress:
        current = None
        index = self.next_index
        if index is not None and self._attempts.get(index):
            current = {'index': index, 'attemptsUsed': self._attempts[index], 'revealed': False}
        return StudentProgress(
            self.assignment.id,
            self.assignment.version,
            self.student_name,
            summary=self.summary,
            results=list(self.results),
            current=current,
        )
