import uvicorn

from app.core.config import HOST, PORT


def main() -> None:
    uvicorn.run("app.main:app", host=HOST, port=PORT)


if __name__ == "__main__":
    main()
