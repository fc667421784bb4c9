"""Start the growth tracking API with environment from .env"""
import logging
import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from growthtrack.config import log_level

env_file = Path(__file__).parent / ".env"
if env_file.exists():
    print(f"Loading environment from {env_file}")
    load_dotenv(env_file)

level = log_level()
logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

host = os.getenv("HOST", "0.0.0.0")
port = int(os.getenv("PORT", "3000"))

print(f"\nStarting growth tracking API on {host}:{port}...")
print(f"Visit: http://localhost:{port}/api/growth/status\n")

uvicorn.run("growthtrack.webapi:app", host=host, port=port, log_level=level.lower())
