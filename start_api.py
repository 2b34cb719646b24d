#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Classic Wines Dashboard API - Startup Script
Validates configuration and serves the FastAPI app with uvicorn.
"""
import os
import sys
from pathlib import Path

# Add src to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))


def main():
    import config
    from utils.logger import get_logger

    logger = get_logger(config.LOG_LEVEL)

    try:
        config.validate_config()
    except ValueError as e:
        print(f"\n[FAIL] {e}")
        logger.critical(f"Configuration invalid: {e}", component="Main")
        sys.exit(1)

    import uvicorn
    from api.main import create_app

    app = create_app()
    logger.info(
        f"REST API running on http://{config.API_HOST}:{config.API_PORT} (Swagger: /docs)",
        component="API",
    )
    if os.getenv('K_SERVICE'):
        logger.info(f"Cloud Run detected: serving on PORT {config.API_PORT}", component="API")

    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT, log_level=config.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
