import uvicorn

from file_gateway.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("file_gateway.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
