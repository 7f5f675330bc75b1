# estoque/config.py
import logging
from pathlib import Path

# Inventory file, relative to the working directory
DATA_FILE = Path("estoque.json")

CURRENCY = "R$"
JSON_INDENT = 2

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(name)s | %(message)s"
