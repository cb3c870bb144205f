import uvicorn

from grubdash.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run("grubdash.main:app", host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
