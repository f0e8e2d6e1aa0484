from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Coffee Notes API",
            version="0.1.0",
            summary="Collaborative sticky-note board for career advice",
            description=(
                "Callers identify themselves with an anonymous session ID generated on the client. "
                "The ID is trusted as given and ownership is not enforced by this API."
            ),
            routes=app.routes,
        )

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Session ID is required", "type": "validation_error"},
                {"message": "Note not found", "type": "not_found"},
                {"message": "An unexpected error occurred.", "type": "internal_server_error"},
            ]
        }
    }
