"""
Hierarchical structured logger for the kiosk bridge.

Features:
- Logger name detected from the caller (module + class), computed once
- Structured fields passed as keyword arguments: log.info("Connected", connId=c)
- Console output by default, optional rotating file per top-level app

Usage:
    from sdk.logging import getLogger

    class EventBridge:
        def __init__(self):
            self.log = getLogger()  # 'kiosk.server.bridge.EventBridge'

        def onOpen(self, connId):
            self.log.info("[Bridge] Client connected", connId=connId)

Property of Uncompromising Sensors LLC.
"""

# Imports
import inspect, logging, logging.handlers, socket
from pathlib import Path
from typing import Any, Dict, Optional
from datetime import datetime, timezone as tz


# Global state
_hostname = socket.gethostname()
_configured = False
_fileHandlers: Dict[str, logging.Handler] = {}  # logPath -> shared handler
_config: Dict[str, Any] = {
    'logDir': None,         # None = console only
    'maxBytes': 10_000_000,
    'backupCount': 5,
    'console': True,
    'level': logging.INFO,
    'utc': False
}

# LogRecord attributes that are never rendered as structured fields
_RESERVED = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None)).keys()) | {
    'message', 'asctime', 'hostname', 'taskName'
}


def configureLogging(logDir: Optional[str] = None, level: str = 'INFO', console: bool = True,
                     utc: bool = False, maxBytes: int = 10_000_000, backupCount: int = 5):
    """
    Configure global logging settings (call once at startup, before getLogger).

    Args:
        logDir: Directory for rotating log files (None: console only)
        level: Minimum level name ('DEBUG', 'INFO', ...)
        console: Also log to stderr
        utc: Render timestamps in UTC
        maxBytes: Size per log file before rotation
        backupCount: Rotated files kept per app
    """
    global _configured

    levelNo = logging.getLevelName(level.upper())
    if not isinstance(levelNo, int):
        raise ValueError(f"Unknown log level: {level}")

    _config.update({'logDir': logDir, 'level': levelNo, 'console': console, 'utc': utc,
                    'maxBytes': maxBytes, 'backupCount': backupCount})

    if logDir:
        Path(logDir).mkdir(parents=True, exist_ok=True)
    _configured = True


def _autoDetectName() -> str:
    """Name of the first caller outside this package, e.g. 'kiosk.server.bridge.EventBridge'"""
    frame = inspect.currentframe()
    try:
        current = frame.f_back if frame else None
        while current is not None:
            moduleName = current.f_globals.get('__name__', '')
            if moduleName.startswith('sdk.logging') or moduleName.startswith('importlib'):
                current = current.f_back
                continue

            name = moduleName if moduleName and moduleName != '__main__' else 'kiosk'
            selfObj = current.f_locals.get('self')
            clsObj = current.f_locals.get('cls')
            if selfObj is not None:
                name = f"{name}.{type(selfObj).__name__}"
            elif isinstance(clsObj, type):
                name = f"{name}.{clsObj.__name__}"
            return name
        return 'unknown'
    finally:
        del frame


class StructuredFormatter(logging.Formatter):
    """Appends structured fields to the message: 'text [key1=value1, key2=value2]'"""

    def __init__(self, fmt=None, datefmt=None, utc=False):
        super().__init__(fmt, datefmt)
        self.utc = utc

    def formatTime(self, record, datefmt=None):
        ct = datetime.fromtimestamp(record.created, tz=tz.utc if self.utc else None)
        if datefmt:
            return ct.strftime(datefmt)
        return f"{ct.strftime('%Y-%m-%d %H:%M:%S')},{int(record.msecs):03d}"

    def format(self, record):
        record.hostname = _hostname
        fields = [f"{key}={value}" for key, value in record.__dict__.items()
                  if key not in _RESERVED and not key.startswith('_')]
        if not fields:
            return super().format(record)

        # Other handlers see the original message
        originalMsg = record.msg
        record.msg = f"{originalMsg} [{', '.join(fields)}]"
        try:
            return super().format(record)
        finally:
            record.msg = originalMsg


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that turns unknown keyword arguments into structured fields.

    Any field name is allowed: names that clash with LogRecord attributes
    (name, msg, args, ...) get a trailing underscore, and the level methods
    take msg/level positionally so 'level=' or 'msg=' are plain fields.
    """

    _PASSTHROUGH = ('exc_info', 'stack_info', 'stacklevel', 'extra')

    def process(self, msg, kwargs):
        fields = {}
        for key in list(kwargs):
            if key in self._PASSTHROUGH:
                continue
            value = kwargs.pop(key)
            fields[f"{key}_" if key in _RESERVED else key] = value
        if fields:
            extra = dict(kwargs.get('extra') or {})
            extra.update(fields)
            kwargs['extra'] = extra
        return msg, kwargs

    def log(self, lvl, msg, /, *args, **kwargs):
        if self.isEnabledFor(lvl):
            msg, kwargs = self.process(msg, kwargs)
            self.logger.log(lvl, msg, *args, **kwargs)

    def debug(self, msg, /, *args, **kwargs):
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg, /, *args, **kwargs):
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg, /, *args, **kwargs):
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg, /, *args, **kwargs):
        self.log(logging.ERROR, msg, *args, **kwargs)

    def exception(self, msg, /, *args, exc_info=True, **kwargs):
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    def critical(self, msg, /, *args, **kwargs):
        self.log(logging.CRITICAL, msg, *args, **kwargs)


def _fileHandlerFor(name: str) -> logging.Handler:
    """One rotating handler per top-level app name, shared by all its loggers"""
    logPath = str(Path(_config['logDir']) / f"{name.split('.')[0]}.log")
    handler = _fileHandlers.get(logPath)
    if handler is None:
        handler = logging.handlers.RotatingFileHandler(
            logPath, maxBytes=_config['maxBytes'], backupCount=_config['backupCount'], encoding='utf-8'
        )
        handler.setFormatter(StructuredFormatter(
            '%(asctime)s - %(hostname)s - %(name)s - %(levelname)s - %(message)s', utc=_config['utc']
        ))
        _fileHandlers[logPath] = handler
    return handler


def getLogger(name: Optional[str] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    The name is detected from the call stack when omitted, so call this once
    in __init__ or at module level and keep the result.
    """
    if not _configured:
        configureLogging()

    if name is None:
        name = _autoDetectName()

    logger = logging.getLogger(name)
    logger.propagate = False

    if not getattr(logger, '_configuredByKiosk', False):
        logger.setLevel(_config['level'])
        if _config['logDir']:
            logger.addHandler(_fileHandlerFor(name))
        if _config['console']:
            consoleHandler = logging.StreamHandler()
            consoleHandler.setFormatter(StructuredFormatter('%(name)s - %(levelname)s - %(message)s',
                                                            utc=_config['utc']))
            logger.addHandler(consoleHandler)
        logger._configuredByKiosk = True

    return StructuredLogger(logger, {})
