import logging
import random
import threading
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timezone
from typing import Callable

from errors import held

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DeviceStatus:
    connected: bool
    battery_level: int | None
    last_seen: str

    def to_dict(self) -> dict:
        return asdict(self)


StatusListener = Callable[[DeviceStatus], None]


class DeviceStatusRegistry:
    """Estado de conexion del dispositivo, compartido entre comandos y el simulador.

    Solo existen dos estados (conectado / desconectado) y la unica transicion
    es toggle(). El registro nunca entrega una referencia viva: snapshot() y
    toggle() devuelven copias inmutables.

    Los listeners se avisan fuera del lock de estado, en el orden de los
    toggles: un aviso que llega despues de uno mas nuevo se descarta.
    """

    def __init__(self, clock: Callable[[], datetime] = utc_now,
                 rng: random.Random | None = None, lock_timeout: float = 5.0):
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock_timeout = lock_timeout
        self._lock = threading.Lock()
        self._status = DeviceStatus(
            connected=False,
            battery_level=None,
            last_seen=self._clock().isoformat(),
        )
        self._version = 0
        self._listeners: list[StatusListener] = []
        # Never acquired while self._lock is held.
        self._notify_lock = threading.RLock()
        self._notified_version = 0

    def subscribe(self, listener: StatusListener):
        self._listeners.append(listener)

    def snapshot(self) -> DeviceStatus:
        with held(self._lock, self._lock_timeout, "estado del dispositivo"):
            return self._status

    def toggle(self) -> DeviceStatus:
        with held(self._lock, self._lock_timeout, "estado del dispositivo"):
            if self._status.connected:
                self._status = replace(self._status, connected=False, battery_level=None)
            else:
                self._status = DeviceStatus(
                    connected=True,
                    battery_level=self._rng.randrange(100),
                    last_seen=self._clock().isoformat(),
                )
            self._version += 1
            version = self._version
            status = self._status

        if status.connected:
            logger.info("Dispositivo conectado (bateria %d%%)", status.battery_level)
        else:
            logger.info("Dispositivo desconectado")
        self._notify(version, status)
        return status

    def touch_if_connected(self, now: datetime) -> bool:
        with held(self._lock, self._lock_timeout, "estado del dispositivo"):
            if not self._status.connected:
                return False
            self._status = replace(self._status, last_seen=now.isoformat())
            return True

    def _notify(self, version: int, status: DeviceStatus):
        with self._notify_lock:
            if version <= self._notified_version:
                logger.debug("Aviso de estado %d descartado (ya se aviso %d)",
                             version, self._notified_version)
                return
            self._notified_version = version
            for listener in list(self._listeners):
                try:
                    listener(status)
                except Exception as e:
                    logger.error("Error notificando cambio de estado: %s", e)
