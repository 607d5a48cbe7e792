"""Dataclasses for generation request/response types."""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

class ModelClass(str, Enum):
    """Which configured model variant serves a request."""
    TEXT = "text"
    VISION = "vision"

@dataclass(frozen=True)
class Attachment:
    """Binary payload sent alongside the prompt (e.g. an image)."""
    data: bytes
    mime_type: str

    def __post_init__(self) -> None:
        if not self.mime_type:
            raise ValueError("attachment mime_type must be non-empty")

@dataclass(frozen=True)
class GenerationRequest:
    """Provider-agnostic generation request."""
    prompt: str
    attachments: tuple[Attachment, ...] = ()
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.prompt:
            raise ValueError("prompt must be non-empty")

@dataclass
class GenerationResult:
    """Text generation result metadata."""
    text: str
    model: str
    latency_ms: int
