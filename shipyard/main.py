from __future__ import annotations

from fastapi import FastAPI

from shipyard.routes.api import router as api_router
from shipyard.startup import configure_logging, init_database

app = FastAPI(title="shipyard")
app.include_router(api_router)


@app.on_event("startup")
def startup() -> None:
    configure_logging()
    init_database()
