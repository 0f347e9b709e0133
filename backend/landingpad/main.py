"""Main FastAPI application."""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from landingpad.config import settings
from landingpad.api import websites, deployments, domains

# Create database tables (in production, use migrations)
# Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Landing Pad API",
    description="Backend API for the Landing Pad website builder",
    version="0.1.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(websites.router)
app.include_router(deployments.router)
app.include_router(domains.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Landing Pad API",
        "version": "0.1.0",
        "docs": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


def run():
    """Serve the API with uvicorn on the configured host and port."""
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    run()
