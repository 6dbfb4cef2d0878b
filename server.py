# server.py
import uvicorn
from common.config import Environment
from main import config

if __name__ == "__main__":
    uvicorn.run(
        "main:app",  # Points to the app instance
        host="0.0.0.0",
        port=8080,
        reload=config.environment == Environment.DEVELOPMENT,
        log_level=config.logging.level_value.lower(),
    )
