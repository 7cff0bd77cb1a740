import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Rutas
BASE_DIR = Path(__file__).parent
DATA_DIR = BASE_DIR / "data"
DB_PATH = Path(os.getenv("POCKETSYNC_DB_PATH", str(DATA_DIR / "pocketsync.db")))

# Servidor
HOST = "127.0.0.1"
PORT = 8790
PORT_RANGE_END = 8800

# Sincronizacion simulada
SYNC_INTERVAL_SECS = float(os.getenv("POCKETSYNC_SYNC_INTERVAL", "10"))

# Locks del store y del estado del dispositivo
LOCK_TIMEOUT_SECS = float(os.getenv("POCKETSYNC_LOCK_TIMEOUT", "5"))

# Bandeja
TRAY_REFRESH_SECS = 2
