"""
Run the API with uvicorn.

Usage:
    python -m user_registry

Environment Variables:
    MONGO_URI: MongoDB connection string (required)
    MONGO_DB_NAME: Database used when MONGO_URI names none (default: users_db)
    HOST / PORT: Bind address (default: 0.0.0.0:3000)
    LOG_LEVEL: Logging level (default: INFO)
"""
import uvicorn

from user_registry.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "user_registry.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
