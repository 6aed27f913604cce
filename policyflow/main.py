from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from policyflow import __version__
from policyflow.core.config import settings
from policyflow.api.routes import router

# Configure logging
logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Build and run policy workflow graphs step by step",
    version=__version__
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router, prefix=settings.api_prefix)


@app.get("/")
async def root():
    """Root endpoint with API information"""
    prefix = settings.api_prefix
    return {
        "message": settings.app_name,
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "create_graph": f"POST {prefix}/graphs",
            "list_graphs": f"GET {prefix}/graphs",
            "add_step": f"POST {prefix}/graphs/{{graph_id}}/nodes",
            "add_custom_step": f"POST {prefix}/graphs/{{graph_id}}/custom-nodes",
            "connect": f"POST {prefix}/graphs/{{graph_id}}/edges",
            "run_workflow": f"POST {prefix}/graphs/{{graph_id}}/run",
            "get_run": f"GET {prefix}/runs/{{run_id}}",
            "export_xml": f"GET {prefix}/graphs/{{graph_id}}/export/xml",
            "list_actions": f"GET {prefix}/actions",
            "memory_stats": f"GET {prefix}/memory/stats",
            "demo_policy_issuance": f"POST {prefix}/demo/policy-issuance"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
