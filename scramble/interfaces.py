"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod


class Storage(ABC):
    """Abstract base class for student progress and teacher state storage.

    Values are the plain dicts produced by the models' to_dict().
    """

    @abstractmethod
    def load_progress(self, key: str) -> dict | None:
        """Load progress stored under `ss::<assignmentId>::<studentName>`.
        Returns None if nothing is stored or the record is unreadable."""
        pass

    @abstractmethod
    def save_progress(self, key: str, progress: dict) -> None:
        """Save progress under a storage key."""
        pass

    @abstractmethod
    def clear_progress(self, key: str) -> bool:
        """Delete stored progress. Returns True if something was removed."""
        pass

    @abstractmethod
    def list_progress_keys(self, assignment_id: str) -> list[str]:
        """Storage keys of every student who saved progress for an assignment."""
        pass

    @abstractmethod
    def load_teacher_draft(self) -> dict | None:
        """Load the teacher's unsent authoring form, or None."""
        pass

    @abstractmethod
    def save_teacher_draft(self, draft: dict) -> None:
        """Save the teacher's authoring form."""
        pass

    @abstractmethod
    def load_share_history(self) -> list[dict]:
        """Load previously generated share links, newest first."""
        pass

    @abstractmethod
    def save_share_history(self, entries: list[dict]) -> None:
        """Replace the stored share history."""
        pass
