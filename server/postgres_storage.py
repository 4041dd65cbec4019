"""PostgreSQL storage implementation."""

import json
import logging
import os
import psycopg2
from psycopg2.extras import RealDictCursor

from scramble.config import TEACHER_DRAFT_STORAGE_KEY, TEACHER_HISTORY_STORAGE_KEY, SHARE_HISTORY_LIMIT
from scramble.interfaces import Storage
from scramble.session import progress_storage_key

logger = logging.getLogger(__name__)


class PostgresStorage(Storage):
    """PostgreSQL-based storage implementation."""

    def __init__(self, db_url: str = None):
        self.db_url = db_url or os.environ.get(
            'DATABASE_URL',
            'postgresql://localhost:5432/scramble'
        )
        self._conn = None
        self._initialized = False

    @property
    def conn(self):
        """Lazy connection initialization."""
        if self._conn is None or self._conn.closed:
            self._conn = psycopg2.connect(self.db_url)
            if not self._initialized:
                self._init_db()
                self._initialized = True
        return self._conn

    def _init_db(self):
        """Create tables if they don't exist."""
        with self._conn.cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS student_progress (
                    storage_key VARCHAR(512) PRIMARY KEY,
                    assignment_id VARCHAR(255) NOT NULL,
                    progress JSONB NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_student_progress_assignment
                ON student_progress(assignment_id)
            """)
            # Teacher state, one row per state key
            cur.execute("""
                CREATE TABLE IF NOT EXISTS teacher_state (
                    state_key VARCHAR(255) PRIMARY KEY,
                    value JSONB NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
        self._conn.commit()

    def close(self):
        """Close the database connection."""
        if self._conn and not self._conn.closed:
            self._conn.close()

    def load_progress(self, key: str) -> dict | None:
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    "SELECT progress FROM student_progress WHERE storage_key = %s",
                    (key,)
                )
                row = cur.fetchone()
                if row:
                    return row['progress']
                return None
        except Exception as e:
            logger.error(f"Error loading progress: {e}")
            return None

    def save_progress(self, key: str, progress: dict) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO student_progress (storage_key, assignment_id, progress, updated_at)
                    VALUES (%s, %s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (storage_key)
                    DO UPDATE SET progress = EXCLUDED.progress, updated_at = CURRENT_TIMESTAMP
                """, (key, progress.get('assignmentId', ''), json.dumps(progress)))
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error saving progress: {e}")
            self.conn.rollback()
            raise

    def clear_progress(self, key: str) -> bool:
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    "DELETE FROM student_progress WHERE storage_key = %s",
                    (key,)
                )
                deleted = cur.rowcount > 0
            self.conn.commit()
            return deleted
        except Exception as e:
            logger.error(f"Error clearing progress: {e}")
            self.conn.rollback()
            return False

    def list_progress_keys(self, assignment_id: str) -> list[str]:
        try:
            with self.conn.cursor() as cur:
                cur.execute(
                    "SELECT storage_key FROM student_progress WHERE storage_key LIKE %s "
                    "ORDER BY storage_key",
                    (progress_storage_key(assignment_id, '').replace('%', r'\%') + '%',)
                )
                return [row[0] for row in cur.fetchall()]
        except Exception as e:
            logger.error(f"Error listing progress: {e}")
            return []

    def _load_teacher_value(self, state_key: str):
        try:
            with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(
                    "SELECT value FROM teacher_state WHERE state_key = %s",
                    (state_key,)
                )
                row = cur.fetchone()
                return row['value'] if row else None
        except Exception as e:
            logger.error(f"Error loading {state_key}: {e}")
            return None

    def _save_teacher_value(self, state_key: str, value) -> None:
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO teacher_state (state_key, value, updated_at)
                    VALUES (%s, %s, CURRENT_TIMESTAMP)
                    ON CONFLICT (state_key)
                    DO UPDATE SET value = EXCLUDED.value, updated_at = CURRENT_TIMESTAMP
                """, (state_key, json.dumps(value)))
            self.conn.commit()
        except Exception as e:
            logger.error(f"Error saving {state_key}: {e}")
            self.conn.rollback()
            raise

    def load_teacher_draft(self) -> dict | None:
        draft = self._load_teacher_value(TEACHER_DRAFT_STORAGE_KEY)
        return draft if isinstance(draft, dict) else None

    def save_teacher_draft(self, draft: dict) -> None:
        self._save_teacher_value(TEACHER_DRAFT_STORAGE_KEY, draft)

    def load_share_history(self) -> list[dict]:
        history = self._load_teacher_value(TEACHER_HISTORY_STORAGE_KEY)
        return history if isinstance(history, list) else []

    def save_share_history(self, entries: list[dict]) -> None:
        self._save_teacher_value(TEACHER_HISTORY_STORAGE_KEY, entries[:SHARE_HISTORY_LIMIT])
