#!/usr/bin/env python3
"""
Writing one log stream to several destinations at once.

Terminals get colored level tags, files get plain text.

Created by Ben Moag (Fenixflow)
"""

import os
import sys
import tempfile

from fanlog import Logger


def main():
    temp_dir = tempfile.mkdtemp()
    path = os.path.join(temp_dir, "app.log")

    with open(path, "w") as log_file, open(os.path.join(temp_dir, "errors.log"), "w") as errors:
        logger = Logger(sys.stdout)
        logger.add_output(log_file)

        # Errors go to their own file only
        logger.set_level_output("error", errors)

        logger.info("written to stdout and app.log")
        logger.error("written to errors.log")

    print(f"\nLogs written to {temp_dir}")


if __name__ == "__main__":
    main()
