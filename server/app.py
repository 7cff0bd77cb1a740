from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

import config
from server.commands import CommandFacade
from server.routes import create_router


def create_app(commands: CommandFacade) -> FastAPI:
    app = FastAPI(title="PocketSync", version="0.1.0")

    router = create_router(commands)
    app.include_router(router, prefix="/api")

    static_dir = config.BASE_DIR / "static"
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(static_dir), html=True), name="static")

    return app
