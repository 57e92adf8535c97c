# run.py

import uvicorn

from app.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",  # Accept connections from any IP on the host
        port=settings.PORT,
        reload=False
    )
