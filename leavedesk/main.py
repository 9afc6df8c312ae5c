import logging

import uvicorn

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from leavedesk.config import settings
from leavedesk.exceptions import LeaveDeskError
from leavedesk.routers import leaves, realtime, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - %(message)s',
)

logger = logging.getLogger(__name__)

PROD_MODE = settings.PRODUCTION_MODE

app = FastAPI(title=settings.PROJECT_TITLE)

app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(leaves.router, prefix="/leaves", tags=["leaves"])
app.include_router(realtime.router, tags=["realtime"])

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LeaveDeskError)
async def leave_desk_error_handler(request: Request, exc: LeaveDeskError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Server error"},
    )


@app.get("/")
def index():
    return {"message": "Hello LeaveDesk"}


if __name__ == "__main__":
    if PROD_MODE == True:
        # Run Uvicorn without reload in production
        uvicorn.run("leavedesk.main:app", host=settings.HOST, port=settings.PORT, reload=False)

    else:
        # Run Uvicorn with reload=True in development mode
        uvicorn.run("leavedesk.main:app", host=settings.HOST, port=settings.PORT, reload=True)
