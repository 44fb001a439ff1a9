"""ASGI entrypoint for the Bgee web app: `uvicorn app:app` from the web/ directory."""

import logging

from bgee_web.server import create_app

logging.basicConfig(level=logging.INFO)

app = create_app()


def main() -> None:
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
