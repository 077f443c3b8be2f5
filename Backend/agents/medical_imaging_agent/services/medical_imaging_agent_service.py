from typing import Dict, List

from loguru import logger

from agents.medical_imaging_agent.agent.chat_agent import ChatAgent
from agents.medical_imaging_agent.agent.diagnosis_agent import DiagnosisAgent
from agents.medical_imaging_agent.agent.utils import normalize_image
from agents.medical_imaging_agent.exceptions import RequestValidationFailure
from config.settings import get_settings


class MedicalImagingAgentService:
    def __init__(self, diagnosis_agent: DiagnosisAgent, chat_agent: ChatAgent):
        self.diagnosis_agent = diagnosis_agent
        self.chat_agent = chat_agent
        self.settings = get_settings()

    def analyze_image(self, image: str | None) -> str:
        """
        Normalize an uploaded image and ask the vision model for a diagnosis.

        Args:
            image: Base64 image string, optionally with a data-URI prefix

        Returns:
            Diagnosis text
        """
        if not image:
            raise RequestValidationFailure("No image data provided")

        logger.info(f"Analyzing image payload ({len(image)} characters)")

        normalized = normalize_image(image, max_dimension=self.settings.IMAGE_MAX_DIMENSION)
        return self.diagnosis_agent.diagnose(normalized)

    def process_message(self, messages: List[Dict[str, str]], diagnosis: str) -> str:
        """
        Continue the conversation about a diagnosis.

        Args:
            messages: Full client-held conversation, oldest first
            diagnosis: Diagnosis text returned earlier by analyze_image()

        Returns:
            The model's reply to the latest user message
        """
        logger.info(f"Processing chat message (messages: {len(messages)}, diagnosis: {len(diagnosis)} characters)")

        return self.chat_agent.reply(messages=messages, diagnosis=diagnosis)
