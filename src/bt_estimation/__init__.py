import logging
import sys

# 1. Set up a handler and formatter (e.g., for console output)
console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(logging.DEBUG)
formatter = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
console_handler.setFormatter(formatter)

# 2. Attach it to the package logger only; the host application's root
# logger is left alone. Callers lower the level to see per-iteration output.
package_logger = logging.getLogger(__name__)
package_logger.setLevel(logging.WARNING)
package_logger.addHandler(console_handler)
package_logger.propagate = False
