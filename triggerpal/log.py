"""Logging setup for triggerpal"""

import logging

# Attributes present on every LogRecord; anything else came in through ``extra``
_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "asctime", "extras_str"}


class SafeFormatter(logging.Formatter):
    """Custom formatter that safely handles missing extras"""
    def format(self, record):
        extras = {
            key: value for key, value in vars(record).items()
            if key not in _RESERVED
        }
        if extras:
            record.extras_str = ' - ' + ' - '.join(f'{k}={v}' for k, v in extras.items())
        else:
            record.extras_str = ''
        return super().format(record)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a console handler with the safe formatter to the package logger"""
    logger = logging.getLogger('triggerpal')
    logger.setLevel(level.upper())

    # Remove any existing handlers
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    formatter = SafeFormatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s%(extras_str)s'
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
