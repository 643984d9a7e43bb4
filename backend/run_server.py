"""
Run the BTC Tracker backend server.
"""
import os
import sys

# Set working directory and path
backend_dir = os.path.dirname(os.path.abspath(__file__))
os.chdir(backend_dir)
sys.path.insert(0, backend_dir)

# Load environment
from dotenv import load_dotenv
load_dotenv(os.path.join(backend_dir, ".env"))

import uvicorn

from btc_tracker.core.config import get_settings

if __name__ == "__main__":
    settings = get_settings()
    print(f"Starting {settings.app_name} Backend Server...")
    print(f"Weekly store: {settings.weekly_store_backend}")
    print(f"API Docs: http://localhost:{settings.port}/docs")
    print("-" * 50)

    uvicorn.run(
        "btc_tracker.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
