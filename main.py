import logging
import sys
import threading
import webbrowser

import requests
import uvicorn

import config
from db.database import TranscriptStore
from device.simulator import BackgroundSyncSimulator
from device.status import DeviceStatusRegistry
from errors import StoreError
from server.app import create_app
from server.commands import CommandError, CommandFacade
from tray.tray_icon import TrayIcon

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("pocketsync")


def find_available_port(start: int, end: int) -> int:
    import socket
    for port in range(start, end + 1):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            try:
                s.bind((config.HOST, port))
                return port
            except OSError:
                continue
    raise RuntimeError(f"No se encontro un puerto disponible entre {start} y {end}")


def main():
    config.DATA_DIR.mkdir(parents=True, exist_ok=True)

    # Find available port
    try:
        port = find_available_port(config.PORT, config.PORT_RANGE_END)
    except RuntimeError as e:
        logger.error(str(e))
        sys.exit(1)

    if port != config.PORT:
        logger.info("Puerto %d en uso, usando %d", config.PORT, port)
    config.PORT = port

    # Initialize components
    try:
        store = TranscriptStore(config.DB_PATH, lock_timeout=config.LOCK_TIMEOUT_SECS)
    except StoreError as e:
        logger.error(str(e))
        sys.exit(1)
    registry = DeviceStatusRegistry(lock_timeout=config.LOCK_TIMEOUT_SECS)
    simulator = BackgroundSyncSimulator(store, registry, interval=config.SYNC_INTERVAL_SECS)
    commands = CommandFacade(store, registry)

    app = create_app(commands)

    base = f"http://{config.HOST}:{config.PORT}/api"

    # Tray callbacks go through the HTTP API like any other client
    def toggle_connection():
        requests.post(f"{base}/device/toggle", timeout=10).raise_for_status()

    def sync_all():
        requests.post(f"{base}/sync", timeout=10).raise_for_status()

    server_should_stop = threading.Event()

    def quit_app():
        logger.info("Cerrando PocketSync...")
        simulator.stop(timeout=5)
        server_should_stop.set()

    tray = TrayIcon(on_toggle_connection=toggle_connection, on_sync_all=sync_all, on_quit=quit_app)

    # Push connection changes to the tray as soon as they happen
    registry.subscribe(lambda status: tray.update_state(status.connected))

    def refresh_tray():
        try:
            tray.update_state(
                commands.get_device_status().connected,
                commands.get_unsynced_count(),
            )
        except CommandError as e:
            logger.warning("No se pudo refrescar la bandeja: %s", e)

    # New mock transcripts bump the unsynced counter right away
    simulator.subscribe(lambda title, content: refresh_tray())

    # Periodic tray refresh for changes made through the API
    def update_tray_state():
        while not server_should_stop.is_set():
            refresh_tray()
            server_should_stop.wait(config.TRAY_REFRESH_SECS)

    threading.Thread(target=update_tray_state, daemon=True).start()

    simulator.start()

    # Start server in background thread
    server_config = uvicorn.Config(
        app,
        host=config.HOST,
        port=config.PORT,
        log_level="warning",
    )
    server = uvicorn.Server(server_config)

    server_thread = threading.Thread(target=server.run, daemon=True)
    server_thread.start()

    url = f"http://{config.HOST}:{config.PORT}/docs"
    logger.info("PocketSync iniciado en %s", url)
    webbrowser.open(url)

    # Run tray icon on main thread (blocks until quit)
    try:
        tray.run()
    except KeyboardInterrupt:
        pass
    finally:
        quit_app()
        server.should_exit = True
        server_thread.join(timeout=10)
        store.close()


if __name__ == "__main__":
    main()
