"""FastAPI application for facial emotion recognition.

This module provides a REST API with endpoints for:
- /health: Service health check
- /predict: Emotion ranking for one grayscale face image

Example:
    To run the API server:

    $ uvicorn api.main:app --host 0.0.0.0 --port 8000
"""

from .main import app, create_app

__all__ = ["app", "create_app"]
