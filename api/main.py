# api/main.py
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from api.routes import books
from core.exceptions import EntityNotFound, SffvektorError
from core.sa.database import get_database
from core.services.book_list_sync import downloader_from_config
from core.utils.log import get_logger

logger = get_logger("api")

@asynccontextmanager
async def lifespan(app: FastAPI):
    get_database().init_db()
    async with downloader_from_config() as downloader:
        app.state.downloader = downloader
        yield

app = FastAPI(title="sffvektor", lifespan=lifespan)

# CORS configuration
origins = [
    "http://localhost:5173",        # Local Vite dev server
    "http://localhost:4173",        # Local Vite preview
    "http://127.0.0.1:5173",
    "http://localhost",             # Local production URL
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(EntityNotFound)
async def entity_not_found_handler(request: Request, exc: EntityNotFound):
    return JSONResponse(status_code=404, content=exc.to_dict())

@app.exception_handler(SffvektorError)
async def sffvektor_error_handler(request: Request, exc: SffvektorError):
    logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=500, content=exc.to_dict())

app.include_router(books.router)

@app.get("/")
async def root():
    return {"message": "sffvektor"}

# Main execution
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Enable auto-reload
        reload_dirs=["api", "core"]  # Watch both api and core directories for changes
    )
