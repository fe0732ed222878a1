"""Entry point: python -m vibestream"""

import uvicorn

from vibestream.config import settings


def main() -> None:
    """Start the API server."""
    uvicorn.run(
        "vibestream.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    main()
