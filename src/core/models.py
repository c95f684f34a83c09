# core/models.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from core.errors import RefreshTransportError


class ItemStatus(str, Enum):
    QUEUED = "queued"
    STREAMING = "streaming"
    COMPLETE = "complete"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: Any) -> "ItemStatus":
        try:
            return cls(str(raw or "").strip().lower())
        except ValueError:
            return cls.UNKNOWN


class GenerationMode(str, Enum):
    SIMPLE = "simple"
    CUSTOM = "custom"


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _opt(value: Any) -> Optional[str]:
    s = _text(value)
    return s or None


@dataclass(frozen=True)
class Item:
    id: str
    title: str = ""
    status: ItemStatus = ItemStatus.UNKNOWN
    raw_status: str = ""
    audio_url: Optional[str] = None
    image_url: Optional[str] = None
    created_at: str = ""
    tags: str = ""

    @property
    def is_retrievable(self) -> bool:
        # status and audio reference are checked together: "complete" without
        # audio is still not ready
        return self.status is ItemStatus.COMPLETE and bool(self.audio_url)

    @property
    def display_title(self) -> str:
        return self.title or "Untitled"

    @property
    def status_category(self) -> str:
        # success / pending / error / neutral, used for the status badge
        if self.status is ItemStatus.COMPLETE:
            return "success"
        if self.status in (ItemStatus.QUEUED, ItemStatus.STREAMING):
            return "pending"
        if self.status is ItemStatus.ERROR:
            return "error"
        return "neutral"

    @classmethod
    def from_api(cls, data: Any) -> "Item":
        if not isinstance(data, dict):
            raise RefreshTransportError(f"Unexpected library entry: {data!r}")
        item_id = _text(data.get("id")).strip()
        if not item_id:
            raise RefreshTransportError("Library entry without an id.")

        metadata = data.get("metadata") or {}
        tags = metadata.get("tags") if isinstance(metadata, dict) else None

        return cls(
            id=item_id,
            title=_text(data.get("title")),
            status=ItemStatus.parse(data.get("status")),
            raw_status=_text(data.get("status")),
            audio_url=_opt(data.get("audio_url")),
            image_url=_opt(data.get("image_url")),
            created_at=_text(data.get("created_at")),
            tags=_text(tags),
        )


@dataclass(frozen=True)
class JobSpec:
    title: str = ""
    lyrics: str = ""
    style: str = ""
    prompt: str = ""

    def is_valid_for(self, mode: GenerationMode) -> bool:
        if mode is GenerationMode.CUSTOM:
            return bool(self.lyrics)
        return bool(self.prompt)

    def payload_for(self, mode: GenerationMode) -> dict:
        # Wire keys are the service's: custom lyrics travel as `prompt` and the
        # style as `tags`. Only the active mode's fields go on the wire; fields
        # of the other mode are ignored without validation.
        if mode is GenerationMode.CUSTOM:
            return {
                "prompt": self.lyrics,
                "tags": self.style,
                "title": self.title,
                "make_instrumental": False,
                "wait_audio": False,
            }
        return {
            "prompt": self.prompt,
            "make_instrumental": False,
            "wait_audio": False,
        }
