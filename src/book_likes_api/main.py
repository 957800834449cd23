import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from book_likes_api.api.routes.book_likes import router as book_likes_router
from book_likes_api.api.routes.chapter_likes import router as chapter_likes_router
from book_likes_api.api.routes.user_likes import router as user_likes_router
from book_likes_api.config import settings
from book_likes_api.exceptions import LikesError
from book_likes_api.logging_config import configure_logging
from book_likes_api.middleware import RequestContextMiddleware

configure_logging(
    level=settings.log_level,
    output_format=settings.log_format,
    service_name=settings.log_service_name,
)
logger = logging.getLogger(__name__)
logger.info("Application bootstrapped")

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
)
app.add_middleware(RequestContextMiddleware)


@app.exception_handler(LikesError)
async def likes_error_handler(request: Request, exc: LikesError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed path=%s error=%s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(book_likes_router)
app.include_router(chapter_likes_router)
app.include_router(user_likes_router)
