"""
POS API runner
Run this as a separate process: python -m carwash_pos
"""

import logging
import sys

import uvicorn

from .config import PORT

logger = logging.getLogger(__name__)

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logger.info(f"🚀 Starting Car Wash POS API on port {PORT}...")
    try:
        uvicorn.run("carwash_pos.main:app", host="0.0.0.0", port=PORT)
    except KeyboardInterrupt:
        logger.info("👋 POS API stopped by user")
