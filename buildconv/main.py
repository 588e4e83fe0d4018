import logging
import os

from buildconv.api.main import app


def main() -> None:
    import uvicorn

    logging.basicConfig(level=os.getenv("BUILDCONV_LOG_LEVEL", "INFO").upper())
    host = os.getenv("BUILDCONV_HOST", "127.0.0.1")
    port = int(os.getenv("BUILDCONV_PORT", "8002"))
    logging.getLogger("buildconv").info("serving build conventions on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
