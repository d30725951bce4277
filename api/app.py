import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from .routers import bodygraph as bodygraph_router
from .middleware.logging import LoggingMiddleware

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

app = FastAPI(title="hd-bodygraph", version="0.4.0")

# Configure CORS - any origin for development, explicit list otherwise
app_env = os.getenv("APP_ENV")
is_dev = app_env is None or app_env.lower() in {"dev", "development"}

if is_dev:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )
else:
    allowed = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "").split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Length", "Content-Type"],
        max_age=86400,
    )

app.add_middleware(LoggingMiddleware)

app.include_router(bodygraph_router.router)


@app.get("/__health")
def health():
    return {"ok": True}


@app.get("/")
def root():
    return {"message": "hd-bodygraph API is running. POST /api/generate-chart to draw a bodygraph."}
