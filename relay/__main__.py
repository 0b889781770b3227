from __future__ import annotations

import uvicorn

from relay.core.settings import get_settings


def main() -> None:
    settings = get_settings()
    # Logging is configured by relay.main; keep uvicorn from installing its own config.
    uvicorn.run("relay.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
