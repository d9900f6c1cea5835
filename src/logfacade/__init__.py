"""
logfacade

Facade de logging structuré avec:
- Niveaux ordonnés debug < info < warning < error < panic < fatal
- Writers interchangeables: structlog (production), no-op, recorder (tests)
- Filtrage par niveau minimum
- Champs extraits du contexte de requête par middlewares (request id)
- Masquage des secrets dans la sortie rendue

Example:
    from logfacade import Config, Level, must, try_new

    logger = must(*try_new(Config(log="Dev", level=Level.INFO)))
    logger.with_fields("user_id", "u-789").info("User logged in")
    logger.sync()
"""

from .interfaces import (
    # Types
    Level,
    LogEntry,
    CtxMiddleware,
    level_from_string,
    # Interfaces
    Writer,
    # Exceptions
    LogFacadeError,
)
from .config import (
    Config,
    ConfigError,
    DEVELOPMENT_MODE,
    load_config,
)
from .noop import (
    NoOpWriter,
    NOOP_WRITER,
)
from .recorder import (
    Recorder,
)
from .structlog_writer import (
    StructlogWriter,
    new_structlog_writer,
    # Exceptions
    PanicError,
    WriterConstructionError,
)
from .secret_mask import (
    secret_mask,
)
from .request_id import (
    new_context,
    from_context,
    request_id_middleware,
    request_scope,
)
from .logger import (
    Logger,
    DEFAULT_MIDDLEWARES,
    new,
    try_new,
    new_with_writer,
    must,
    new_noop_logger,
)

__all__ = [
    # Types
    "Level",
    "LogEntry",
    "CtxMiddleware",
    "level_from_string",
    # Interfaces
    "Writer",
    # Configuration
    "Config",
    "DEVELOPMENT_MODE",
    "load_config",
    # Implementations
    "NoOpWriter",
    "NOOP_WRITER",
    "Recorder",
    "StructlogWriter",
    "new_structlog_writer",
    "secret_mask",
    # Request context
    "new_context",
    "from_context",
    "request_id_middleware",
    "request_scope",
    # Logger
    "Logger",
    "DEFAULT_MIDDLEWARES",
    "new",
    "try_new",
    "new_with_writer",
    "must",
    "new_noop_logger",
    # Exceptions
    "LogFacadeError",
    "ConfigError",
    "PanicError",
    "WriterConstructionError",
]
