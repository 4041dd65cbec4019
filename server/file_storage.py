"""File-based storage implementation."""

import json
import logging
import os

from scramble.config import TEACHER_DRAFT_STORAGE_KEY, TEACHER_HISTORY_STORAGE_KEY, SHARE_HISTORY_LIMIT
from scramble.interfaces import Storage
from scramble.session import progress_storage_key

logger = logging.getLogger(__name__)


class FileStorage(Storage):
    """File-based storage implementation.

    Progress records live in one JSON object keyed by storage key; teacher
    state lives in a second file keyed by state name.
    """

    def __init__(self, state_dir: str = None):
        # Project root is one level up from server/
        project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        self.state_dir = state_dir or os.environ.get('SCRAMBLE_STATE_DIR') or project_root

    def _get_progress_file(self) -> str:
        return os.path.join(self.state_dir, 'scramble_progress.json')

    def _get_teacher_file(self) -> str:
        return os.path.join(self.state_dir, 'scramble_teacher.json')

    def _load_json(self, path: str) -> dict:
        if os.path.exists(path):
            try:
                with open(path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    return data
                logger.warning(f"Ignoring malformed state file {path}")
            except Exception as e:
                logger.error(f"Failed to read {path}: {e}")
        return {}

    def _save_json(self, path: str, data: dict) -> None:
        os.makedirs(self.state_dir, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def load_progress(self, key: str) -> dict | None:
        progress = self._load_json(self._get_progress_file()).get(key)
        return progress if isinstance(progress, dict) else None

    def save_progress(self, key: str, progress: dict) -> None:
        try:
            records = self._load_json(self._get_progress_file())
            records[key] = progress
            self._save_json(self._get_progress_file(), records)
        except Exception as e:
            logger.error(f"Failed to save progress for {key}: {e}")
            raise

    def clear_progress(self, key: str) -> bool:
        records = self._load_json(self._get_progress_file())
        if key not in records:
            return False
        del records[key]
        try:
            self._save_json(self._get_progress_file(), records)
        except Exception as e:
            logger.error(f"Failed to clear progress for {key}: {e}")
            return False
        return True

    def list_progress_keys(self, assignment_id: str) -> list[str]:
        prefix = progress_storage_key(assignment_id, '')
        return sorted(k for k in self._load_json(self._get_progress_file()) if k.startswith(prefix))

    def load_teacher_draft(self) -> dict | None:
        draft = self._load_json(self._get_teacher_file()).get(TEACHER_DRAFT_STORAGE_KEY)
        return draft if isinstance(draft, dict) else None

    def save_teacher_draft(self, draft: dict) -> None:
        try:
            state = self._load_json(self._get_teacher_file())
            state[TEACHER_DRAFT_STORAGE_KEY] = draft
            self._save_json(self._get_teacher_file(), state)
        except Exception as e:
            logger.error(f"Failed to save teacher draft: {e}")
            raise

    def load_share_history(self) -> list[dict]:
        history = self._load_json(self._get_teacher_file()).get(TEACHER_HISTORY_STORAGE_KEY)
        return history if isinstance(history, list) else []

    def save_share_history(self, entries: list[dict]) -> None:
        try:
            state = self._load_json(self._get_teacher_file())
            state[TEACHER_HISTORY_STORAGE_KEY] = entries[:SHARE_HISTORY_LIMIT]
            self._save_json(self._get_teacher_file(), state)
        except Exception as e:
            logger.error(f"Failed to save share history: {e}")
            raise
