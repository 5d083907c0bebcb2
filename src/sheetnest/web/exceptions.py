"""Custom exceptions and error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from sheetnest.application.config import ConfigError


class NestingInputError(Exception):
    """Raised when the engine rejects a part list or sheet size mapping."""

    def __init__(self, errors: list[str], error_type: str = "validation") -> None:
        self.errors = errors
        self.error_type = error_type
        super().__init__(f"Nesting input rejected: {errors}")


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(NestingInputError)
    async def nesting_input_error_handler(
        request: Request, exc: NestingInputError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Nesting input rejected",
                "error_type": exc.error_type,
                "details": [{"message": e} for e in exc.errors],
            },
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": [
                    {key: value for key, value in detail.items() if key != "value"}
                    for detail in exc.details
                ],
            },
        )
