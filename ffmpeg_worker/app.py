import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ffmpeg_worker import __version__
from ffmpeg_worker.core import config
from ffmpeg_worker.core.errors import WorkerError
from ffmpeg_worker.core.logging import setup_logging
from ffmpeg_worker.schemas.render import (
    ErrorResponse,
    HealthResponse,
    RenderRequest,
    RenderResponse,
)
from ffmpeg_worker.services.processor import process_render

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="ffmpeg worker",
    version=__version__
)


def error_response(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"ok": False, "error": message}
    )


# =========================
# ERROR ENVELOPE
# =========================

@app.exception_handler(WorkerError)
async def worker_error_handler(request: Request, exc: WorkerError):
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return error_response(str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return error_response("; ".join(parts) or "Invalid request body")


@app.middleware("http")
async def limit_body_size(request: Request, call_next):
    length = request.headers.get("content-length")
    if length is not None:
        try:
            too_large = int(length) > config.MAX_BODY_BYTES
        except ValueError:
            return error_response("Invalid Content-Length")
        if too_large:
            return error_response("Request body too large", status_code=413)
    return await call_next(request)


# =========================
# ENDPOINTS
# =========================

@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post(
    "/render",
    response_model=RenderResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}},
)
def api_render(req: RenderRequest):
    # sync handler: FastAPI runs it in the threadpool, the loop stays free
    try:
        uploaded = process_render(req)
    except WorkerError:
        raise
    except Exception as e:
        logger.exception("render failed unexpectedly")
        raise WorkerError(str(e) or e.__class__.__name__) from e

    return RenderResponse(
        uploaded_file_id=uploaded.id,
        web_view_link=uploaded.web_view_link,
        web_content_link=uploaded.web_content_link,
    )
