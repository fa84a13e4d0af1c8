"""Main FastAPI application."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gemini_chat import __version__
from gemini_chat.api.endpoints import router
from gemini_chat.utils.logging import setup_logging

setup_logging()

app = FastAPI(
    title="Gemini Chat",
    description="Chat front-end that relays each user turn to the Gemini generateContent API.",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    tags_metadata=[
        {
            "name": "Conversation",
            "description": "Submit messages, read transcripts and reset sessions.",
        },
        {
            "name": "Health",
            "description": "Service health monitoring and status checks.",
        },
    ],
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("gemini_chat.main:app", host="0.0.0.0", port=8000, log_level="info")


if __name__ == "__main__":
    run()
