from enum import Enum
from typing import Any, Dict, Optional

import ulid
from pydantic import BaseModel, ConfigDict, Field


class EntryKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"

    @property
    def label(self) -> str:
        return self.value


class NewEntry(BaseModel):
    """Clipboard entry produced by ingestion, before the store assigns an id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: EntryKind = Field(alias="type")
    content: str
    name: Optional[str] = None
    size: Optional[int] = Field(default=None, ge=0)

    @property
    def payload_size(self) -> int:
        return len(self.content.encode("utf-8"))

    def with_id(self, entry_id: str) -> "ClipboardEntry":
        return ClipboardEntry(
            id=entry_id,
            kind=self.kind,
            content=self.content,
            name=self.name,
            size=self.size,
        )


class ClipboardEntry(NewEntry):
    """Stored entry. Payload fields never change once the id is assigned."""

    id: str

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "ClipboardEntry":
        return cls.model_validate(record)

    @property
    def display_text(self) -> str:
        if self.kind is EntryKind.TEXT:
            text = self.content.replace("\n", " ").strip()
            return text[:80] + "..." if len(text) > 80 else text
        label = self.name or ("Image" if self.kind is EntryKind.IMAGE else "File")
        if self.size is not None:
            return f"{label} ({self.size / 1024:.2f} KB)"
        return label


def new_entry_id() -> str:
    return f"i_{ulid.new()}"
