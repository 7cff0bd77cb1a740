from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from server.commands import CommandError, CommandFacade


class AddTranscriptRequest(BaseModel):
    title: str
    content: str


class TranscriptResponse(BaseModel):
    id: int
    title: str
    content: str
    created_at: str
    synced: bool


class DeviceStatusResponse(BaseModel):
    connected: bool
    battery_level: int | None = None
    last_seen: str


def create_router(commands: CommandFacade) -> APIRouter:
    router = APIRouter()

    def run(fn, *args):
        try:
            return fn(*args)
        except CommandError as e:
            raise HTTPException(500, str(e))

    # -- Device --

    @router.get("/device", response_model=DeviceStatusResponse)
    def get_device_status():
        return run(commands.get_device_status).to_dict()

    @router.post("/device/toggle", response_model=DeviceStatusResponse)
    def toggle_device_connection():
        return run(commands.toggle_device_connection).to_dict()

    # -- Transcripts --

    @router.get("/transcripts", response_model=list[TranscriptResponse])
    def get_transcripts():
        return [t.to_dict() for t in run(commands.get_transcripts)]

    @router.post("/transcripts", status_code=201)
    def add_transcript(body: AddTranscriptRequest):
        run(commands.add_transcript, body.title, body.content)
        return {"added": True}

    @router.get("/transcripts/{transcript_id}", response_model=TranscriptResponse)
    def get_transcript(transcript_id: int):
        transcript = run(commands.get_transcript, transcript_id)
        if transcript is None:
            raise HTTPException(404, "Transcripcion no encontrada")
        return transcript.to_dict()

    @router.post("/transcripts/{transcript_id}/sync")
    def mark_synced(transcript_id: int):
        run(commands.mark_synced, transcript_id)
        return {"synced": True}

    # -- Sync --

    @router.post("/sync")
    def simulate_sync():
        run(commands.simulate_sync)
        return {"synced": True}

    @router.get("/unsynced-count")
    def get_unsynced_count():
        return {"count": run(commands.get_unsynced_count)}

    return router
