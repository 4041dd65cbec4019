"""Domain models for sentence scramble.

Every model serializes with camelCase keys, the format used inside share
links and saved progress records.
"""

from typing import Optional


def _clean_list(values) -> list[str] | None:
    """Normalize an optional list of strings; empty lists become None."""
    if not values:
        return None
    return [str(v) for v in values]


class SentenceWithOptions:
    """A single sentence the student has to rebuild."""

    def __init__(self, text: str, alts: list[str] = None, lock: list[str] = None,
                 chunks: list[str] = None):
        self.text = text
        self.alts = _clean_list(alts)
        self.lock = _clean_list(lock)
        self.chunks = _clean_list(chunks)

    def to_dict(self) -> dict:
        data = {'text': self.text}
        if self.alts:
            data['alts'] = list(self.alts)
        if self.lock:
            data['lock'] = list(self.lock)
        if self.chunks:
            data['chunks'] = list(self.chunks)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'SentenceWithOptions':
        return cls(
            str(data['text']),
            alts=data.get('alts'),
            lock=data.get('lock'),
            chunks=data.get('chunks'),
        )

    def __eq__(self, other):
        if not isinstance(other, SentenceWithOptions):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'SentenceWithOptions({self.to_dict()!r})'


class AssignmentOptions:
    """Attempt limits, feedback and scrambling policy of an assignment."""

    def __init__(self, hints: str = 'none', feedback: str = 'show-on-wrong',
                 scramble: str = 'seeded', attempts_per_item=None,
                 reveal_after_max: Optional[bool] = None,
                 reveal_answer_after_max_attempts: Optional[bool] = None):
        self.hints = hints
        self.feedback = feedback
        self.scramble = scramble
        self.attempts_per_item = attempts_per_item
        self.reveal_after_max = reveal_after_max
        self.reveal_answer_after_max_attempts = reveal_answer_after_max_attempts

    @property
    def max_attempts(self) -> int | None:
        """Attempts allowed per sentence, None when unlimited."""
        value = self.attempts_per_item
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if value <= 0 or value == float('inf'):
            return None
        return int(value)

    @property
    def reveals_after_max(self) -> bool:
        return bool(self.reveal_after_max or self.reveal_answer_after_max_attempts)

    def to_dict(self) -> dict:
        data = {
            'hints': self.hints,
            'feedback': self.feedback,
            'scramble': self.scramble,
        }
        if self.attempts_per_item is not None:
            data['attemptsPerItem'] = self.attempts_per_item
        if self.reveal_after_max is not None:
            data['revealAfterMax'] = self.reveal_after_max
        if self.reveal_answer_after_max_attempts is not None:
            data['revealAnswerAfterMaxAttempts'] = self.reveal_answer_after_max_attempts
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'AssignmentOptions':
        return cls(
            hints=data.get('hints', 'none'),
            feedback=data.get('feedback', 'show-on-wrong'),
            scramble=data.get('scramble', 'seeded'),
            attempts_per_item=data.get('attemptsPerItem'),
            reveal_after_max=data.get('revealAfterMax'),
            reveal_answer_after_max_attempts=data.get('revealAnswerAfterMaxAttempts'),
        )

    def __eq__(self, other):
        if not isinstance(other, AssignmentOptions):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'AssignmentOptions({self.to_dict()!r})'


class Assignment:
    """A teacher-authored homework unit shared through a link."""

    def __init__(self, id: str, title: str, version, seed: str,
                 options: AssignmentOptions, sentences: list[SentenceWithOptions]):
        self.id = id
        self.title = title
        self.version = version
        self.seed = seed
        self.options = options
        self.sentences = sentences

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'version': self.version,
            'seed': self.seed,
            'options': self.options.to_dict(),
            'sentences': [s.to_dict() for s in self.sentences],
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Assignment':
        return cls(
            data['id'],
            data['title'],
            data['version'],
            data['seed'],
            AssignmentOptions.from_dict(data.get('options') or {}),
            [SentenceWithOptions.from_dict(s) for s in data['sentences']],
        )

    def __eq__(self, other):
        if not isinstance(other, Assignment):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'Assignment(id={self.id!r}, title={self.title!r}, sentences={len(self.sentences)})'


class Word:
    """A draggable unit: a single word, a locked phrase or a chunk."""

    def __init__(self, id: str, text: str):
        self.id = id
        self.text = text

    def to_dict(self) -> dict:
        return {'id': self.id, 'text': self.text}

    @classmethod
    def from_dict(cls, data: dict) -> 'Word':
        return cls(data['id'], data['text'])

    def __eq__(self, other):
        if not isinstance(other, Word):
            return NotImplemented
        return self.id == other.id and self.text == other.text

    def __repr__(self):
        return f'Word({self.id!r}, {self.text!r})'


class Result:
    """Outcome of one sentence in a homework session."""

    def __init__(self, index: int, ok: bool, attempts: Optional[int] = None,
                 revealed: bool = False):
        self.index = index
        self.ok = ok
        self.attempts = attempts
        self.revealed = revealed

    def to_dict(self) -> dict:
        data = {'index': self.index, 'ok': self.ok, 'revealed': self.revealed}
        if self.attempts is not None:
            data['attempts'] = self.attempts
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Result':
        return cls(
            int(data['index']),
            bool(data.get('ok', False)),
            attempts=data.get('attempts'),
            revealed=bool(data.get('revealed', False)),
        )

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'Result({self.to_dict()!r})'


class Summary:
    """Aggregate of a list of results."""

    def __init__(self, total: int = 0, solved_within_max: int = 0, first_try: int = 0,
                 reveals: int = 0, avg_attempts: float = 0):
        self.total = total
        self.solved_within_max = solved_within_max
        self.first_try = first_try
        self.reveals = reveals
        self.avg_attempts = avg_attempts

    def to_dict(self) -> dict:
        return {
            'total': self.total,
            'solvedWithinMax': self.solved_within_max,
            'firstTry': self.first_try,
            'reveals': self.reveals,
            'avgAttempts': self.avg_attempts,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Summary':
        """Load a summary, accepting the older {correct, total, reveals} shape."""
        solved = data.get('solvedWithinMax')
        if solved is None:
            solved = data.get('correct', 0)
        return cls(
            total=data.get('total') or 0,
            solved_within_max=solved or 0,
            first_try=data.get('firstTry') or 0,
            reveals=data.get('reveals') or 0,
            avg_attempts=data.get('avgAttempts') or 0,
        )

    def __eq__(self, other):
        if not isinstance(other, Summary):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f'Summary({self.to_dict()!r})'


class StudentProgress:
    """Persisted state of one student working through one assignment."""

    def __init__(self, assignment_id: str, version, student_name: str,
                 summary: Summary = None, results: list[Result] = None,
                 current: dict = None):
        self.assignment_id = assignment_id
        self.version = version
        self.student_name = student_name
        self.summary = summary or Summary()
        self.results = results or []
        self.current = current  # {index, attemptsUsed, revealed}

    def to_dict(self) -> dict:
        data = {
            'assignmentId': self.assignment_id,
            'version': self.version,
            'student': {'name': self.student_name},
            'summary': self.summary.to_dict(),
            'results': [r.to_dict() for r in self.results],
        }
        if self.current is not None:
            data['current'] = dict(self.current)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'StudentProgress':
        student = data.get('student') or {}
        return cls(
            data['assignmentId'],
            data.get('version', 1),
            student.get('name', ''),
            summary=Summary.from_dict(data.get('summary') or {}),
            results=[Result.from_dict(r) for r in data.get('results', [])],
            current=data.get('current'),
        )


class TeacherDraft:
    """Unsent authoring form contents, autosaved between visits."""

    def __init__(self, title: str = '', sentences: str = '', attempts_per_item: str = '3',
                 reveal_after_max_attempts: bool = True, instructions_template: str = '',
                 updated_at: str = ''):
        self.title = title
        self.sentences = sentences
        self.attempts_per_item = attempts_per_item
        self.reveal_after_max_attempts = reveal_after_max_attempts
        self.instructions_template = instructions_template
        self.updated_at = updated_at

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'sentences': self.sentences,
            'attemptsPerItem': self.attempts_per_item,
            'revealAfterMaxAttempts': self.reveal_after_max_attempts,
            'instructionsTemplate': self.instructions_template,
            'updatedAt': self.updated_at,
        }


class ShareHistoryEntry:
    """A link the teacher generated, kept so it can be copied again later."""

    def __init__(self, id: str, title: str, link: str, instructions: str, created_at: str,
                 attempts_per_item: str, reveal_after_max_attempts: bool, template: str,
                 sentences: list[str], qr_file_name: str):
        self.id = id
        self.title = title
        self.link = link
        self.instructions = instructions
        self.created_at = created_at
        self.attempts_per_item = attempts_per_item
        self.reveal_after_max_attempts = reveal_after_max_attempts
        self.template = template
        self.sentences = sentences
        self.qr_file_name = qr_file_name

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'title': self.title,
            'link': self.link,
            'instructions': self.instructions,
            'createdAt': self.created_at,
            'attemptsPerItem': self.attempts_per_item,
            'revealAfterMaxAttempts': self.reveal_after_max_attempts,
            'template': self.template,
            'sentences': list(self.sentences),
            'qrFileName': self.qr_file_name,
        }
