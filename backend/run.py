"""
Entry point for the Interplanetary Mission Risk Assessment backend.
"""
import uvicorn
from mission_risk.config import get_settings


def main():
    """Run the FastAPI application."""
    settings = get_settings()
    uvicorn.run(
        "mission_risk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level
    )


if __name__ == "__main__":
    main()
