
import sys
import logging
from copy import copy


this = sys.modules[__name__]
MAPPING = {
    'DEBUG': 37,
    'INFO': 36,
    'WARNING': 33,
    'ERROR': 31,
    'CRITICAL': 41
}

PARAM_MAPPING = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
    'critical': logging.CRITICAL
}

PREFIX = '\033['
SUFFIX = '\033[0m'

logger = logging.getLogger('spanktunnel')


class ColoredFormatter(logging.Formatter):
    def __init__(self, pattern):
        logging.Formatter.__init__(self, pattern)

    def format(self, record):
        colored_record = copy(record)
        level_name = colored_record.levelname

        seq = MAPPING.get(level_name, 37)
        colored_level_name = '{0}{1}m{2}{3}' \
            .format(PREFIX, seq, level_name, SUFFIX)
        colored_record.levelname = colored_level_name

        return logging.Formatter.format(self, colored_record)


def setup_dummy_logger():
    dummy = logging.getLogger('spanktunnel')
    for handler in dummy.handlers.copy():
        dummy.removeHandler(handler)

    dummy.addHandler(logging.NullHandler())
    this.logger = dummy


def setup_logger(path: str, level: str):
    """ Creates a logger instance with proper handlers configured

    stdout is reserved for the port report, so the console handler writes to stderr
    """

    configured = logging.getLogger('spanktunnel')
    formatter = ColoredFormatter("[%(asctime)s][%(name)s][%(levelname)s]: %(message)s")

    level = PARAM_MAPPING[level] if level in PARAM_MAPPING else PARAM_MAPPING['info']
    configured.setLevel(level)

    for handler in configured.handlers.copy():
        configured.removeHandler(handler)

    logging_handler = logging.StreamHandler(sys.stderr)
    logging_handler.setFormatter(formatter)
    logging_handler.setLevel(level)
    configured.addHandler(logging_handler)

    if path:
        log_file_handler = logging.FileHandler(path, 'a+')
        log_file_handler.setFormatter(logging.Formatter("[%(asctime)s][%(name)s][%(levelname)s]: %(message)s"))
        log_file_handler.setLevel(level)
        configured.addHandler(log_file_handler)

    this.logger = configured


class Logger:
    @staticmethod
    def debug(msg: str):
        this.logger.debug(msg)

    @staticmethod
    def info(msg: str):
        this.logger.info(msg)

    @staticmethod
    def warning(msg: str):
        this.logger.warning(msg)

    @staticmethod
    def error(msg: str):
        this.logger.error(msg)
