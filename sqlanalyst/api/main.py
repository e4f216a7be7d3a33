import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from sqlanalyst import __version__
from sqlanalyst.config import get_firebase_config, get_settings
from sqlanalyst.utils.logging import configure_logging
from .routers import auth, pages, query, workspace

settings = get_settings()
configure_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing identity-provider settings are fatal: let the ValidationError escape.
    firebase = get_firebase_config()
    logging.info(f"Identity provider project: {firebase.project_id}")
    if settings.mock_mode:
        logging.warning("Running in MOCK_MODE, no requests reach the text-to-SQL service")
    yield


app = FastAPI(
    title="SQL Data Analysis AI",
    description="Authenticated relay from natural-language questions to a text-to-SQL service.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*", "Authorization"],
)

app.include_router(pages.router)
app.include_router(auth.router)
app.include_router(query.router)
app.include_router(workspace.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/{path:path}", include_in_schema=False)
async def fallback(path: str):
    return RedirectResponse("/", status_code=303)
