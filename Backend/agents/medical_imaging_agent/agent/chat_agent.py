from typing import Dict, List, Optional

from google import genai
from google.genai import types
from loguru import logger

from agents.medical_imaging_agent.agent.prompt_templates.v1.chat_agent import build_context_message
from agents.medical_imaging_agent.exceptions import ExternalServiceError, NoUserMessageError
from config.settings import get_settings


def to_provider_history(messages: List[Dict[str, str]]) -> List[types.Content]:
    """Translate client chat messages to Gemini turns (user stays user, anything else is model)."""
    return [
        types.Content(
            role="user" if message["role"] == "user" else "model",
            parts=[types.Part.from_text(text=message["content"])]
        )
        for message in messages
    ]


def find_last_user_index(messages: List[Dict[str, str]]) -> int:
    for index in range(len(messages) - 1, -1, -1):
        if messages[index]["role"] == "user":
            return index
    raise NoUserMessageError()


class ChatAgent:
    def __init__(
            self,
            client: genai.Client,
            model: Optional[str] = None,
            max_output_tokens: Optional[int] = None,
            include_history: Optional[bool] = None
    ):
        self.settings = get_settings()
        self.client = client
        self.model = model or self.settings.CHAT_MODEL
        self.max_output_tokens = (
            self.settings.CHAT_MAX_OUTPUT_TOKENS if max_output_tokens is None else max_output_tokens
        )
        self.include_history = (
            self.settings.CHAT_INCLUDE_HISTORY if include_history is None else include_history
        )

    def build_history(
            self,
            messages: List[Dict[str, str]],
            diagnosis: str,
            last_user_index: int
    ) -> List[types.Content]:
        """
        Build the turns that seed a fresh chat session.

        The diagnosis context always comes first. Prior turns (everything before
        the latest user message) follow only when include_history is enabled.
        """
        translated = to_provider_history(messages)

        history = [
            types.Content(role="user", parts=[types.Part.from_text(text=build_context_message(diagnosis))])
        ]
        if self.include_history:
            history.extend(translated[:last_user_index])

        return history

    def reply(self, messages: List[Dict[str, str]], diagnosis: str) -> str:
        """
        Answer the most recent user message in the context of a diagnosis.

        Args:
            messages: Ordered {role, content} dicts, as sent by the client
            diagnosis: Diagnosis text the conversation is about

        Returns:
            The model's reply, verbatim

        Raises:
            NoUserMessageError: If messages holds no user entry
            ExternalServiceError: If the provider call fails or returns no text
        """
        last_user_index = find_last_user_index(messages)
        history = self.build_history(messages, diagnosis, last_user_index)
        last_user_message = messages[last_user_index]

        logger.info(f"Sending chat message to {self.model} (history turns: {len(history)}, "
                    f"max_output_tokens: {self.max_output_tokens})")
        logger.debug(f"User message: {last_user_message['content']}")

        try:
            chat = self.client.chats.create(
                model=self.model,
                history=history,
                config=types.GenerateContentConfig(max_output_tokens=self.max_output_tokens)
            )
            response = chat.send_message(last_user_message["content"])
        except Exception as e:
            logger.error(f"Error calling chat model: {e}")
            raise ExternalServiceError(f"Chat model request failed: {e}") from e

        text = getattr(response, "text", None)
        if not text:
            logger.error("Chat model returned an empty response")
            raise ExternalServiceError("Chat model returned an empty response")

        logger.info(f"Chat reply generated ({len(text)} characters)")
        return text
