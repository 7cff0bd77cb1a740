import logging
import random
import threading
from datetime import datetime
from typing import Callable

from db.database import TranscriptStore
from device.status import DeviceStatusRegistry, utc_now
from errors import LockError, StoreError

logger = logging.getLogger(__name__)

MOCK_TITLES = [
    "Meeting Notes",
    "Voice Memo",
    "Interview Recording",
    "Lecture Summary",
    "Brainstorming Session",
    "Phone Call",
    "Presentation Notes",
    "Research Notes",
]

MOCK_CONTENTS = [
    "Discussed project timeline and deliverables for the upcoming sprint.",
    "Quick reminder about the dentist appointment tomorrow at 3 PM.",
    "Technical interview covering system design and algorithms.",
    "Professor explained the fundamentals of machine learning models.",
    "Ideas for the new product launch campaign and marketing strategy.",
    "Conversation with client about requirements and expectations.",
    "Key points from the quarterly business review presentation.",
    "Research findings on user behavior and engagement metrics.",
]

TranscriptListener = Callable[[str, str], None]


class BackgroundSyncSimulator:
    """Genera transcripciones de prueba mientras el dispositivo esta conectado.

    Cada tick lee el registro de estado; si hay conexion refresca last_seen y
    escribe una transcripcion elegida al azar del pool fijo. Los errores de
    persistencia se registran y el bucle sigue corriendo.
    """

    def __init__(self, store: TranscriptStore, registry: DeviceStatusRegistry,
                 interval: float = 10.0, rng: random.Random | None = None,
                 clock: Callable[[], datetime] = utc_now):
        self.store = store
        self.registry = registry
        self.interval = interval
        self._rng = rng or random.Random()
        self._clock = clock
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._listeners: list[TranscriptListener] = []

    def subscribe(self, listener: TranscriptListener):
        self._listeners.append(listener)

    def tick(self) -> tuple[str, str] | None:
        try:
            if not self.registry.touch_if_connected(self._clock()):
                return None
        except LockError as e:
            logger.error("Tick omitido: %s", e)
            return None

        title = self._rng.choice(MOCK_TITLES)
        content = self._rng.choice(MOCK_CONTENTS)
        try:
            self.store.add(title, content)
        except (StoreError, LockError) as e:
            logger.error("No se pudo guardar la transcripcion simulada: %s", e)
            return None

        logger.info("Transcripcion simulada: %s", title)
        for listener in list(self._listeners):
            try:
                listener(title, content)
            except Exception as e:
                logger.error("Error notificando nueva transcripcion: %s", e)
        return title, content

    def _run(self):
        # First tick happens immediately, then every `interval` seconds.
        while not self._stop.is_set():
            self.tick()
            self._stop.wait(self.interval)

    def start(self) -> threading.Thread:
        if self._thread and self._thread.is_alive():
            return self._thread
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="sync-simulator", daemon=True)
        self._thread.start()
        logger.info("Simulador de sincronizacion iniciado (cada %ss)", self.interval)
        return self._thread

    def stop(self, timeout: float | None = None):
        self._stop.set()
        if self._thread:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()
