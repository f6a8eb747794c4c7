import os
from pathlib import Path


DATA_FILE = Path(os.getenv("LEDGER_DATA_FILE", "finance_data.txt"))
MAX_TRANSACTIONS = int(os.getenv("LEDGER_MAX_TRANSACTIONS", "2000"))

CATEGORY_LEN = 63
NOTE_LEN = 127

DELIMITER = "|"
DELIMITER_REPLACEMENT = "/"

MIN_YEAR = 1900
MAX_YEAR = 3000

CHART_WIDTH = 50

LOG_LEVEL = os.getenv("LEDGER_LOG_LEVEL", "WARNING")
