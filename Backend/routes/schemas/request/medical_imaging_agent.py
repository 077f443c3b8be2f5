from typing import List, Literal

from pydantic import BaseModel, Field


class AnalyzeImageRequest(BaseModel):
    """Request to diagnose a medical image."""
    image: str | None = Field(None, description="Base64-encoded image, optionally prefixed with data:image/<type>;base64,")


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = Field(..., description="Author of the message")
    content: str = Field(..., description="Message text")


class ChatMessageRequest(BaseModel):
    """Request to continue a conversation about a diagnosis."""
    messages: List[ChatMessage] = Field(default_factory=list, description="Full conversation so far, oldest first")
    diagnosis: str = Field("", description="Diagnosis text returned by /analyze")
