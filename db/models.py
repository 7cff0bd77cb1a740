from dataclasses import asdict, dataclass

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS transcripts (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    title       TEXT NOT NULL,
    content     TEXT NOT NULL,
    created_at  TEXT NOT NULL,
    synced      INTEGER NOT NULL DEFAULT 0
);
"""


@dataclass(frozen=True)
class Transcript:
    id: int
    title: str
    content: str
    created_at: str
    synced: bool

    @classmethod
    def from_row(cls, row) -> "Transcript":
        return cls(
            id=int(row["id"]),
            title=row["title"],
            content=row["content"],
            created_at=row["created_at"],
            synced=bool(row["synced"]),
        )

    def to_dict(self) -> dict:
        return asdict(self)
