# Backend/main.py
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from mangum import Mangum

from config.logger import setup_logging
from config.settings import get_settings

settings = get_settings()

# Routers and providers
from agents.medical_imaging_agent.dependencies import create_genai_client
from routes import health, medical_imaging_agent
from routes.errors import request_validation_exception_handler
from routes.middleware import RequestBodyLimitMiddleware, RequestBodyTooLarge, request_body_too_large_handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    app.state.genai_client = create_genai_client()
    logger.info(f"{settings.APP_NAME} v{settings.APP_VERSION} ready "
                f"(vision model: {settings.VISION_MODEL}, chat model: {settings.CHAT_MODEL})")

    yield


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.add_middleware(RequestBodyLimitMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(RequestBodyTooLarge, request_body_too_large_handler)

# Register routes
app.include_router(health.router, tags=["Health"])
app.include_router(medical_imaging_agent.router, tags=["Medical Imaging Agent"])

# handler for AWS
handler = Mangum(app)

if __name__ == "__main__":
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host=settings.APP_HOST, port=settings.PORT)
