# main.py
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from bson.errors import InvalidDocument
from pymongo.errors import PyMongoError

from payparty import __version__, config
from payparty.routes.party_routes import router as party_router
from payparty.storage_mongo import PartyStorage, close_storage, get_storage, init_storage

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # connect once, fail fast if Mongo is unreachable
    try:
        init_storage()
    except Exception as e:
        logger.error(f"Failed to connect to MongoDB: {e}")
        raise
    yield
    close_storage()


app = FastAPI(title="Pay Party API", version=__version__, lifespan=lifespan)

# credentials cannot be combined with a wildcard origin
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(party_router)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # bad bodies are client errors, reported as 400 rather than FastAPI's 422
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(OverflowError)
@app.exception_handler(InvalidDocument)
async def unencodable_body_handler(request: Request, exc: Exception):
    # values BSON cannot hold, e.g. integers wider than 64 bits inside free-form payloads
    logger.warning(f"{request.method} {request.url.path} rejected: {exc}")
    return PlainTextResponse(str(exc), status_code=400)


@app.exception_handler(PyMongoError)
async def store_error_handler(request: Request, exc: PyMongoError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return PlainTextResponse(str(exc), status_code=500)


# --- General Endpoints ---

@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the Pay Party API"}


@app.get("/health", tags=["Root"])
def health_check(storage: PartyStorage = Depends(get_storage)):
    try:
        storage.ping()
    except PyMongoError as e:
        logger.warning(f"Health check failed: {e}")
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": "MongoDB"})
    return {"status": "healthy", "database": "MongoDB"}


def run():
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
