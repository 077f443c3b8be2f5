from typing import Annotated

from fastapi import Depends, Request
from google import genai

from agents.medical_imaging_agent.agent.chat_agent import ChatAgent
from agents.medical_imaging_agent.agent.diagnosis_agent import DiagnosisAgent
from agents.medical_imaging_agent.services.medical_imaging_agent_service import MedicalImagingAgentService
from config.settings import get_settings


# =============================================================================
# CLIENT DEPENDENCIES
# =============================================================================

def create_genai_client() -> genai.Client:
    """Build the authenticated Google GenAI client. Called once at startup."""
    return genai.Client(api_key=get_settings().GEMINI_API_KEY)


def get_genai_client(request: Request) -> genai.Client:
    """Provide the client created in the application lifespan."""
    return request.app.state.genai_client


GenAIClientDependency = Annotated[genai.Client, Depends(get_genai_client)]


# =============================================================================
# AGENT DEPENDENCIES
# =============================================================================

def get_diagnosis_agent(client: GenAIClientDependency) -> DiagnosisAgent:
    """Provide a configured DiagnosisAgent instance."""
    return DiagnosisAgent(client)


def get_chat_agent(client: GenAIClientDependency) -> ChatAgent:
    """Provide a configured ChatAgent instance."""
    return ChatAgent(client)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_medical_imaging_agent_service(
        diagnosis_agent: Annotated[DiagnosisAgent, Depends(get_diagnosis_agent)],
        chat_agent: Annotated[ChatAgent, Depends(get_chat_agent)]) -> MedicalImagingAgentService:
    """Provide a configured MedicalImagingAgentService instance."""
    return MedicalImagingAgentService(diagnosis_agent, chat_agent)


# =============================================================================
# TYPE ALIASES FOR DEPENDENCY INJECTION
# =============================================================================

MedicalImagingAgentServiceDependency = Annotated[
    MedicalImagingAgentService, Depends(get_medical_imaging_agent_service)]
