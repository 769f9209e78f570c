from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from postgen.config import config
from postgen.features.generate.router import router as generate_router, shutdown_orchestrator
from postgen.features.topics.router import router as topics_router
from postgen.logger import get_logger

log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"post generator up: text={config.gemini_text_model} image={config.gemini_image_model}")
    if not config.gemini_api_key:
        log.warning("GEMINI_API_KEY is not set; generation will fail with AuthMissing")
    yield
    # no orphaned progress timers after shutdown
    shutdown_orchestrator()


app = FastAPI(title="Post Generator API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins,
    allow_credentials=config.allow_credentials,   # keep False with allow_origins=["*"]
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(generate_router)
app.include_router(topics_router)


@app.get("/healthz")
async def healthz():
    return {"ok": True}
