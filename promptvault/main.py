from __future__ import annotations

import sys
from pathlib import Path

if __package__ is None:
    sys.path.append(str(Path(__file__).resolve().parent))
    from app.application import create_app
    from app.core.settings import LOG_LEVEL, PORT
else:
    from .app.application import create_app
    from .app.core.settings import LOG_LEVEL, PORT

app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=PORT, log_level=LOG_LEVEL)


if __name__ == "__main__":
    run()
