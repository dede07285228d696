#!/usr/bin/env python3
"""
Child loggers, handlers and forwarding to other loggers.

Created by Ben Moag (Fenixflow)
"""

import logging
import sys

from fanlog import Logger


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")

    app = Logger(sys.stdout, prefix="app")
    db = app.child("db")
    api = app.child("api").child("v1")

    db.info("connected", host="localhost")
    api.warn("deprecated endpoint", path="/users")

    # Same key, same child
    assert app.child("db") is db

    # Children share the handler chain registered before they were created
    audit = Logger(sys.stderr, time_format="")
    audit.handle(lambda log: log.level > 3)  # drop info and debug
    audit.install(logging.getLogger("audit"))
    audit.error("forwarded to stdlib logging", user="bob")

    print("children:", app.list_child_keys())


if __name__ == "__main__":
    main()
