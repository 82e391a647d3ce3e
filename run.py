#!/usr/bin/env python3
"""
Run script for the Verdict API
"""
import uvicorn

from verdict.config.settings import settings
from verdict.main import app

if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, reload=settings.debug)
