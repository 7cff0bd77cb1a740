import logging

from db.database import TranscriptStore
from db.models import Transcript
from device.status import DeviceStatus, DeviceStatusRegistry
from errors import LockError, StoreError

logger = logging.getLogger(__name__)


class CommandError(Exception):
    pass


class CommandFacade:
    """Operaciones expuestas a la capa de comandos (HTTP, bandeja).

    Envoltorios delgados sobre el store y el registro: no validan nada por
    su cuenta y convierten StoreError / LockError en CommandError.
    """

    def __init__(self, store: TranscriptStore, registry: DeviceStatusRegistry):
        self.store = store
        self.registry = registry

    def _call(self, action: str, fn, *args):
        try:
            return fn(*args)
        except (StoreError, LockError) as e:
            logger.error("Error en %s: %s", action, e)
            raise CommandError(f"Error en {action}: {e}") from e

    def add_transcript(self, title: str, content: str) -> None:
        self._call("add_transcript", self.store.add, title, content)

    def get_transcripts(self) -> list[Transcript]:
        return self._call("get_transcripts", self.store.list)

    def get_transcript(self, transcript_id: int) -> Transcript | None:
        return self._call("get_transcript", self.store.get, transcript_id)

    def mark_synced(self, transcript_id: int) -> None:
        self._call("mark_synced", self.store.mark_synced, transcript_id)

    def simulate_sync(self) -> None:
        self._call("simulate_sync", self.store.mark_all_synced)

    def get_device_status(self) -> DeviceStatus:
        return self._call("get_device_status", self.registry.snapshot)

    def get_unsynced_count(self) -> int:
        return self._call("get_unsynced_count", self.store.unsynced_count)

    def toggle_device_connection(self) -> DeviceStatus:
        return self._call("toggle_device_connection", self.registry.toggle)
