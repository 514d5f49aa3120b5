"""Entrypoint for running the API: ``python -m chirpy``."""
import uvicorn

from chirpy.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("chirpy.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    main()
