from pydantic import BaseModel, Field


class AnalyzeImageResponse(BaseModel):
    """Response carrying the model's diagnosis."""
    diagnosis: str = Field(..., description="Free-text diagnosis, verbatim from the model")


class ChatMessageResponse(BaseModel):
    """Response to a chat message."""
    response: str = Field(..., description="Model reply to the latest user message")


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
    fullError: str | None = None


class HealthCheck(BaseModel):
    status: str
    model_client_ready: bool
