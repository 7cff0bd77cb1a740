import logging
import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from db.models import SCHEMA_SQL, Transcript
from errors import StoreError, held

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TranscriptStore:
    """Transcripciones persistidas en SQLite.

    Una sola conexion compartida entre hilos, protegida por un unico lock:
    cada operacion publica ejecuta su sentencia y el commit con el lock
    tomado, asi que las llamadas concurrentes quedan serializadas.
    """

    def __init__(self, db_path: Path, clock: Callable[[], datetime] = utc_now,
                 lock_timeout: float = 5.0):
        self.db_path = Path(db_path)
        self._clock = clock
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._init_schema()
        except (OSError, sqlite3.Error) as e:
            raise StoreError(f"No se pudo abrir la base de datos {self.db_path}: {e}") from e

    def _init_schema(self):
        self._conn.executescript(SCHEMA_SQL)
        self._conn.commit()

    def execute(self, sql: str, params: tuple = ()) -> int:
        with held(self._lock, self._lock_timeout, "transcripts"):
            return self._execute_locked(sql, params)

    def _execute_locked(self, sql: str, params: tuple) -> int:
        try:
            cursor = self._conn.execute(sql, params)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StoreError(f"Error ejecutando sentencia: {e}") from e
        return cursor.rowcount

    def fetchone(self, sql: str, params: tuple = ()) -> dict | None:
        with held(self._lock, self._lock_timeout, "transcripts"):
            try:
                row = self._conn.execute(sql, params).fetchone()
            except sqlite3.Error as e:
                raise StoreError(f"Error consultando: {e}") from e
        return dict(row) if row else None

    def fetchall(self, sql: str, params: tuple = ()) -> list[dict]:
        with held(self._lock, self._lock_timeout, "transcripts"):
            try:
                rows = self._conn.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StoreError(f"Error consultando: {e}") from e
        return [dict(row) for row in rows]

    def add(self, title: str, content: str) -> None:
        # created_at is read under the lock so timestamp order matches id order.
        with held(self._lock, self._lock_timeout, "transcripts"):
            created_at = self._clock().isoformat()
            self._execute_locked(
                "INSERT INTO transcripts (title, content, created_at, synced) VALUES (?, ?, ?, 0)",
                (title, content, created_at),
            )
        logger.debug("Transcripcion guardada: %r", title)

    def get(self, transcript_id: int) -> Transcript | None:
        row = self.fetchone("SELECT * FROM transcripts WHERE id = ?", (transcript_id,))
        return _decode(row) if row else None

    def list(self) -> list[Transcript]:
        rows = self.fetchall("SELECT * FROM transcripts ORDER BY created_at DESC, id DESC")
        return [_decode(r) for r in rows]

    def mark_synced(self, transcript_id: int) -> None:
        # Unknown ids are a silent no-op.
        self.execute("UPDATE transcripts SET synced = 1 WHERE id = ?", (transcript_id,))

    def mark_all_synced(self) -> None:
        updated = self.execute("UPDATE transcripts SET synced = 1 WHERE synced = 0")
        logger.info("%d transcripciones marcadas como sincronizadas", updated)

    def unsynced_count(self) -> int:
        row = self.fetchone("SELECT COUNT(*) AS n FROM transcripts WHERE synced = 0")
        return int(row["n"])

    def close(self):
        with held(self._lock, self._lock_timeout, "transcripts"):
            self._conn.close()


def _decode(row: dict) -> Transcript:
    try:
        return Transcript.from_row(row)
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Fila de transcripcion invalida: {e}") from e
