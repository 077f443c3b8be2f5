from fastapi import APIRouter, Request

from config.settings import get_settings
from routes.schemas.response.medical_imaging_agent import HealthCheck

router = APIRouter()


@router.get("/")
def root():
    return {"message": f"{get_settings().APP_NAME} is running"}


@router.get("/health", response_model=HealthCheck)
def health_check(request: Request) -> HealthCheck:
    """Report whether the model client was initialized."""
    return HealthCheck(
        status="healthy",
        model_client_ready=getattr(request.app.state, "genai_client", None) is not None
    )
