import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from app.core.config import settings
from app.transports import SseTransportAdapter, StatelessHttpAdapter
from observability import build_log_context, configure_logging, log_event

API_CTX = build_log_context(tool="api_server")

ENDPOINTS = {
    "health": "/",
    "sse": "/sse (for Claude Desktop)",
    "messages": "/message/ (SSE client-to-server channel)",
    "streamableHttp": "/mcp (for other MCP clients)",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    for w in settings.config_warnings():
        log_event("config_warning", ctx=API_CTX, data={"warning": str(w)}, level=logging.WARNING)
    log_event(
        "server_start",
        ctx=API_CTX,
        data={"host": settings.API_HOST, "port": settings.API_PORT, "endpoints": ENDPOINTS},
    )
    yield
    log_event("server_stop", ctx=API_CTX)


def create_app(json_response: bool | None = None) -> FastAPI:
    app = FastAPI(title=f"{settings.PROJECT_NAME} MCP Server", version=settings.VERSION, lifespan=lifespan)

    sse = SseTransportAdapter("/message/")
    stateless = StatelessHttpAdapter(
        json_response=settings.MCP_JSON_RESPONSE if json_response is None else json_response
    )

    @app.get("/")
    async def health_check(request: Request):
        log_event(
            "health_check",
            ctx=API_CTX,
            data={
                "method": request.method,
                "url": str(request.url),
                "user_agent": request.headers.get("user-agent"),
                "ip": request.client.host if request.client else None,
            },
        )
        return {"status": "ok", "message": "Free Coin Price MCP Server is running"}

    # Raw ASGI endpoints: the MCP transports write the response themselves.
    app.add_route("/sse", sse, methods=["GET"])
    app.mount("/message/", app=sse.handle_message)
    app.add_route("/mcp", stateless, methods=["POST"])

    return app


app = create_app()


def main() -> None:
    import uvicorn

    configure_logging(settings.LOG_LEVEL)
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)


if __name__ == "__main__":
    main()
