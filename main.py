#!/usr/bin/env python3
"""Risk Radar — readmission risk assessment API entry point."""

import logging

import uvicorn

from readmission.config import LOG_LEVEL
from readmission.api import app  # noqa: F401

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
