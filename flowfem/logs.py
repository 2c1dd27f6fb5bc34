import sys
import logging
from tqdm import tqdm

FORMAT = '%(asctime)s %(levelname)s - %(message)s'
FORMATTER = logging.Formatter(FORMAT, datefmt="%d-%m-%Y %H:%M:%S")

handler = logging.StreamHandler(sys.stdout)
handler.setFormatter(FORMATTER)


class TqdmLoggingHandler(logging.Handler):
    """Route log records through ``tqdm.write`` so that they do not break an
    active progress bar."""
    def __init__(self, level=logging.NOTSET):
        super().__init__(level)
        self.setFormatter(FORMATTER)

    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg)
            self.flush()
        except Exception:
            self.handleError(record)
