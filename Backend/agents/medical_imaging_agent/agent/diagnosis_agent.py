"""Diagnosis Agent for describing medical images using a Gemini vision model."""

import base64
from typing import Optional

from google import genai
from google.genai import types
from loguru import logger

from agents.medical_imaging_agent.agent.prompt_templates.v1.diagnosis_agent import DIAGNOSIS_AGENT_PROMPT_V1
from agents.medical_imaging_agent.agent.schemas import NormalizedImage
from agents.medical_imaging_agent.exceptions import ExternalServiceError
from config.settings import get_settings


class DiagnosisAgent:
    """Agent that sends a normalized image plus a fixed instruction prompt to Gemini."""

    def __init__(self, client: genai.Client, model: Optional[str] = None):
        """
        Initialize the Diagnosis Agent.

        Args:
            client: Authenticated Google GenAI client shared by the application
            model: Gemini vision model (defaults to VISION_MODEL from settings)
        """
        self.settings = get_settings()
        self.model = model or self.settings.VISION_MODEL
        self.client = client

    def build_contents(self, image: NormalizedImage) -> list[types.Content]:
        """Build the single user turn holding the prompt and the inline image."""
        return [
            types.Content(
                role="user",
                parts=[
                    types.Part.from_text(text=DIAGNOSIS_AGENT_PROMPT_V1),
                    types.Part.from_bytes(
                        data=base64.b64decode(image.base64_data),
                        mime_type=image.mime_type
                    ),
                ],
            )
        ]

    def diagnose(self, image: NormalizedImage) -> str:
        """
        Request a free-text diagnosis for the image.

        Args:
            image: Image produced by normalize_image()

        Returns:
            The model's text, verbatim

        Raises:
            ExternalServiceError: If the provider call fails or returns no text
        """
        logger.info(f"Requesting diagnosis from {self.model} for {image.width}x{image.height} {image.mime_type} image")

        try:
            response = self.client.models.generate_content(
                model=self.model,
                contents=self.build_contents(image)
            )
        except Exception as e:
            logger.error(f"Error calling vision model: {e}")
            raise ExternalServiceError(f"Vision model request failed: {e}") from e

        diagnosis = getattr(response, "text", None)
        if not diagnosis:
            logger.error("Vision model returned an empty response")
            raise ExternalServiceError("Vision model returned an empty response")

        logger.info(f"Diagnosis generated ({len(diagnosis)} characters)")
        return diagnosis
