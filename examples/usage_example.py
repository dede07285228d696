#!/usr/bin/env python3
"""
Basic fanlog usage: levels, fields, formatters and the default logger.

Created by Ben Moag (Fenixflow)
"""

import sys

import fanlog
from fanlog import Fields, Logger


def main():
    logger = Logger(sys.stdout, level="debug")

    logger.info("service started", port=8080)
    logger.warn("cache miss", Fields(key="user:42"))
    logger.debug("loading plugins")  # carries a stack trace for handlers
    logger.errorf("retry %d of %d failed", 2, 5)

    # Plain output without a level tag
    logger.println("---")

    # Structured output for every level
    logger.set_format("json")
    logger.info("request", method="GET", path="/health", status=200)

    # Only errors as indented JSON
    plain = Logger(sys.stdout)
    plain.set_level_format("error", "json", 2)
    plain.info("still plain text")
    plain.error("rendered as json", code=500)

    # The package-level functions use a shared default logger
    fanlog.configure(level="debug", time_format="%H:%M:%S")
    fanlog.info("from the default logger")


if __name__ == "__main__":
    main()
