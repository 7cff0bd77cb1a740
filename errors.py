import threading
from contextlib import contextmanager


class StoreError(Exception):
    """Fallo de persistencia: apertura, esquema, sentencia o lectura de filas."""


class LockError(Exception):
    """No se pudo adquirir un lock dentro del tiempo configurado."""


@contextmanager
def held(lock: threading.Lock, timeout: float, name: str):
    if not lock.acquire(timeout=timeout):
        raise LockError(f"No se pudo adquirir el lock de {name} en {timeout}s")
    try:
        yield
    finally:
        lock.release()
