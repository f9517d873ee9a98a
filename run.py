import os

import uvicorn

from tuning_catalog.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "tuning_catalog.main:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 8000)),
        workers=int(os.environ.get("WEB_CONCURRENCY", 1)),
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )
