from fastapi import APIRouter, status
from loguru import logger

from agents.medical_imaging_agent.dependencies import MedicalImagingAgentServiceDependency
from agents.medical_imaging_agent.exceptions import RequestValidationFailure
from routes.errors import server_error_response, validation_error_response
from routes.schemas.request.medical_imaging_agent import AnalyzeImageRequest, ChatMessageRequest
from routes.schemas.response.medical_imaging_agent import AnalyzeImageResponse, ChatMessageResponse, \
    ErrorResponse

router = APIRouter()


@router.post("/analyze",
             response_model=AnalyzeImageResponse,
             status_code=status.HTTP_200_OK,
             responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
def analyze_image(
        request: AnalyzeImageRequest,
        orchestrator: MedicalImagingAgentServiceDependency
):
    """Diagnose a base64-encoded medical image."""
    logger.info("analyze_image called")

    try:
        diagnosis = orchestrator.analyze_image(request.image)
    except RequestValidationFailure as e:
        logger.warning(f"analyze_image rejected: {e}")
        return validation_error_response(str(e))
    except Exception as e:
        return server_error_response(e, "Error analyzing image", request.model_dump())

    return AnalyzeImageResponse(diagnosis=diagnosis)


@router.post("/chat",
             response_model=ChatMessageResponse,
             status_code=status.HTTP_200_OK,
             responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}})
def chat(
        request: ChatMessageRequest,
        orchestrator: MedicalImagingAgentServiceDependency
):
    """Answer the latest user message about a diagnosis."""
    logger.info(f"chat called with {len(request.messages)} messages")

    try:
        response = orchestrator.process_message(
            messages=[message.model_dump() for message in request.messages],
            diagnosis=request.diagnosis
        )
    except Exception as e:
        return server_error_response(e, "Error processing chat message", request.model_dump())

    return ChatMessageResponse(response=response)
