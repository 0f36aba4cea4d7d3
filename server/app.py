from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import config
from server.errors import http_exception_handler, validation_exception_handler
from server.routes import create_router

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def create_app(auth, rate_limiter, transcriber, summarizer) -> FastAPI:
    app = FastAPI(title="AtaVoz", version="0.1.0")

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        # Preflight never reaches the routes
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    router = create_router(auth, rate_limiter, transcriber, summarizer)
    app.include_router(router, prefix=config.FUNCTIONS_PREFIX)

    return app
