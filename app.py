"""
App assembly entry point.

Re-exports the FastAPI `app` from `promptscope.api.main` so it can be served
with ``uvicorn app:app``.
"""

from promptscope.api.main import app  # noqa: F401
