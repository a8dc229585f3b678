from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hub_engine.api.routes import chat, context, models
from hub_engine.config import settings
from hub_engine.services.service_context import ServiceContext


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests may install their own context before startup.
    owns_services = getattr(app.state, "services", None) is None
    if owns_services:
        app.state.services = ServiceContext.from_settings(settings)
    yield
    if owns_services:
        await app.state.services.aclose()
        app.state.services = None


app = FastAPI(
    title="Hub Engine",
    description="Web-retrieved context and streaming answers for the chat assistant",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(context.router)
app.include_router(chat.router)
app.include_router(models.router)


@app.get("/api/health")
async def health():
    return {"status": "ok", "service": "hub-engine"}
