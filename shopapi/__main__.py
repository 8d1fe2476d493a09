import uvicorn

from shopapi.config import PORT


def main() -> None:
    uvicorn.run("shopapi.main:app", host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    main()
