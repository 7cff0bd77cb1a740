import logging
import webbrowser

import pystray
from PIL import Image, ImageDraw

import config

logger = logging.getLogger(__name__)

ICON_SIZE = 64


def _create_icon_image(color: str) -> Image.Image:
    img = Image.new("RGBA", (ICON_SIZE, ICON_SIZE), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    margin = 8
    draw.ellipse(
        [margin, margin, ICON_SIZE - margin, ICON_SIZE - margin],
        fill=color,
    )
    return img


def _icon_disconnected() -> Image.Image:
    return _create_icon_image("#888888")


def _icon_connected() -> Image.Image:
    return _create_icon_image("#2ecc71")


class TrayIcon:
    def __init__(self, on_toggle_connection, on_sync_all, on_quit):
        self._on_toggle_connection = on_toggle_connection
        self._on_sync_all = on_sync_all
        self._on_quit = on_quit
        self._connected = False
        self._unsynced = 0
        self._icon: pystray.Icon | None = None

    def _title(self) -> str:
        estado = "conectado" if self._connected else "desconectado"
        return f"PocketSync - {estado} ({self._unsynced} sin sincronizar)"

    def _build_menu(self):
        if self._connected:
            toggle_label = "Desconectar dispositivo"
        else:
            toggle_label = "Conectar dispositivo"

        return pystray.Menu(
            pystray.MenuItem(toggle_label, self._toggle_connection, default=True),
            pystray.MenuItem("Sincronizar todo", self._sync_all),
            pystray.MenuItem(
                "Abrir panel",
                lambda: webbrowser.open(f"http://{config.HOST}:{config.PORT}/docs"),
            ),
            pystray.Menu.SEPARATOR,
            pystray.MenuItem("Salir", self._quit),
        )

    def _toggle_connection(self):
        try:
            self._on_toggle_connection()
        except Exception as e:
            logger.error("Error cambiando conexion: %s", e)

    def _sync_all(self):
        try:
            self._on_sync_all()
        except Exception as e:
            logger.error("Error sincronizando: %s", e)

    def _quit(self):
        try:
            self._on_quit()
        except Exception as e:
            logger.error("Error quitting: %s", e)
        if self._icon:
            self._icon.stop()

    def update_state(self, connected: bool, unsynced: int | None = None):
        self._connected = connected
        if unsynced is not None:
            self._unsynced = unsynced
        if self._icon:
            self._icon.icon = _icon_connected() if connected else _icon_disconnected()
            self._icon.title = self._title()
            self._icon.menu = self._build_menu()

    def run(self):
        self._icon = pystray.Icon(
            "PocketSync",
            icon=_icon_disconnected(),
            title=self._title(),
            menu=self._build_menu(),
        )
        self._icon.run()
