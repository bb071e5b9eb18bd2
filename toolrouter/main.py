# Run from project root: uvicorn toolrouter.main:app --reload

import logging

from fastapi import FastAPI

from toolrouter.api.routes import router
from toolrouter.core.config import LOG_LEVEL

logging.basicConfig(level=LOG_LEVEL)


app = FastAPI(title="TechBay Support Router")
app.include_router(router)
