"""Schemas for the Medical Imaging Agent."""

from pydantic import BaseModel


class NormalizedImage(BaseModel):
    """A size-bounded image ready to be sent to the vision model."""
    base64_data: str
    mime_type: str
    width: int
    height: int
