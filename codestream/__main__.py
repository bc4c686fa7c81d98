import uvicorn

from codestream.core import config


def main() -> None:
    uvicorn.run("codestream.main:app", host=config.HOST, port=config.PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
