# artifact_catalog/middleware/cors.py
from __future__ import annotations
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def add_cors(app: FastAPI) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],          # tighten in prod
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*", "x-correlation-id"],
        expose_headers=["x-correlation-id"],
        max_age=600,
    )
