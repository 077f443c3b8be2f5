import base64
import io
import os

os.environ.setdefault("GEMINI_API_KEY", "test-key")

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from agents.medical_imaging_agent.dependencies import get_genai_client
from config.settings import get_settings
from main import app


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModels:
    def __init__(self, owner):
        self.owner = owner

    def generate_content(self, model, contents):
        self.owner.generate_calls.append({"model": model, "contents": contents})
        if self.owner.error:
            raise self.owner.error
        return FakeResponse(self.owner.text)


class FakeChat:
    def __init__(self, owner, model, history, config):
        self.owner = owner
        self.model = model
        self.history = history
        self.config = config
        self.sent_messages = []

    def send_message(self, message):
        self.sent_messages.append(message)
        if self.owner.error:
            raise self.owner.error
        if self.owner.echo:
            # Echo the seeded context so tests can see what the model received
            return FakeResponse(self.history[0].parts[0].text)
        return FakeResponse(self.owner.text)


class FakeChats:
    def __init__(self, owner):
        self.owner = owner

    def create(self, model, history=None, config=None):
        chat = FakeChat(self.owner, model, history or [], config)
        self.owner.chat_sessions.append(chat)
        return chat


class FakeGenAIClient:
    """Stands in for google.genai.Client and records every call made to it."""

    def __init__(self, text="Model output", error=None, echo=False):
        self.text = text
        self.error = error
        self.echo = echo
        self.generate_calls = []
        self.chat_sessions = []
        self.models = FakeModels(self)
        self.chats = FakeChats(self)


def make_image_base64(size, image_format="PNG", mode="RGB"):
    image = Image.new(mode, size, color=0)
    out = io.BytesIO()
    image.save(out, format=image_format)
    return base64.b64encode(out.getvalue()).decode("utf-8")


def decode_image(base64_data):
    return Image.open(io.BytesIO(base64.b64decode(base64_data)))


@pytest.fixture
def settings():
    return get_settings()


@pytest.fixture
def fake_genai_client():
    return FakeGenAIClient(text="Findings: no abnormality detected.")


@pytest.fixture
def client(fake_genai_client):
    app.dependency_overrides[get_genai_client] = lambda: fake_genai_client
    yield TestClient(app)
    app.dependency_overrides.clear()
