import uvicorn

from haggle.config import load_settings


def main() -> None:
    settings = load_settings()
    uvicorn.run("haggle.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
