from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from palettesmith.api.v1 import router as v1_router
from palettesmith.config import config
from palettesmith.schemas import HealthResponse
from palettesmith.services.colors import __version__

app = FastAPI(
    title="Palettesmith",
    description="Color-space conversion, harmony palettes, contrast solving and theme tokens",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(v1_router)


@app.get("/healthz", response_model=HealthResponse)
def health_check():
    """Health check endpoint"""
    return HealthResponse(ok=True, version=__version__, service="palettesmith")


@app.get("/")
def root():
    """Root endpoint"""
    return {
        "message": "Palettesmith API",
        "version": __version__,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
