import os

import uvicorn

from app.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    port = int(os.environ.get("PORT", 8000))

    if settings.debug:
        # reload only while developing locally
        uvicorn.run("app.main:app", host="127.0.0.1", port=port, reload=True)
    else:
        uvicorn.run("app.main:app", host=os.environ.get("HOST", "0.0.0.0"), port=port, log_level="info")
