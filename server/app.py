"""
Horn Designer geometry backend
FastAPI application exposing the R-OSSE horn geometry engine
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes_mesh import router as mesh_router
from api.routes_misc import router as misc_router
from horn.deps import ENGINE_RUNTIME_READY

logger = logging.getLogger(__name__)

app = FastAPI(title="Horn Designer Geometry Engine", version="1.0.0")

# Enable CORS for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(misc_router)
app.include_router(mesh_router)


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Starting Horn Designer geometry backend...")
    logger.info("Engine ready: %s", ENGINE_RUNTIME_READY)
    uvicorn.run(app, host="0.0.0.0", port=8000)
