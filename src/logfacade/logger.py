"""
logfacade - Logger

Point d'entrée du facade: filtre par niveau, lie champs et contexte,
et délègue l'écriture au Writer.
"""

import contextvars
import warnings
from typing import Any, Optional, Sequence, Tuple

from .config import Config
from .interfaces import CtxMiddleware, Level, Writer
from .noop import NOOP_WRITER
from .request_id import request_id_middleware
from .structlog_writer import WriterConstructionError, new_structlog_writer

# Middlewares ajoutés à chaque nouveau Logger, sauf skip_default_middlewares
DEFAULT_MIDDLEWARES: Tuple[CtxMiddleware, ...] = (request_id_middleware,)


class Logger:
    """
    Logger structuré.

    Valeur immuable: with_fields, with_middleware, with_context et
    with_error retournent un nouveau Logger qui partage le niveau et
    les middlewares. Un Logger() sans writer est valide et n'écrit rien.

    Example:
        logger = must(*try_new(Config(log="Dev", level=Level.INFO)))
        logger.with_fields("user_id", "u-789").info("User logged in")
    """

    __slots__ = ("_writer", "_level", "_ctx_middlewares")

    def __init__(
        self,
        writer: Optional[Writer] = None,
        level: Level = Level.DEBUG,
        ctx_middlewares: Sequence[CtxMiddleware] = (),
    ) -> None:
        self._writer = writer
        self._level = level
        self._ctx_middlewares: Tuple[CtxMiddleware, ...] = tuple(ctx_middlewares)

    @property
    def writer(self) -> Writer:
        """Writer utilisé (le writer no-op partagé si aucun)."""
        if self._writer is None:
            return NOOP_WRITER
        return self._writer

    @property
    def level(self) -> Level:
        """Niveau minimum."""
        return self._level

    @property
    def ctx_middlewares(self) -> Tuple[CtxMiddleware, ...]:
        """Middlewares exécutés par with_context, dans l'ordre."""
        return self._ctx_middlewares

    def debug(self, *args: Any) -> None:
        self.log(Level.DEBUG, *args)

    def debugf(self, template: str, *args: Any) -> None:
        self.logf(Level.DEBUG, template, *args)

    def info(self, *args: Any) -> None:
        self.log(Level.INFO, *args)

    def infof(self, template: str, *args: Any) -> None:
        self.logf(Level.INFO, template, *args)

    def warn(self, *args: Any) -> None:
        self.log(Level.WARNING, *args)

    def warnf(self, template: str, *args: Any) -> None:
        self.logf(Level.WARNING, template, *args)

    def error(self, *args: Any) -> None:
        self.log(Level.ERROR, *args)

    def errorf(self, template: str, *args: Any) -> None:
        self.logf(Level.ERROR, template, *args)

    def panic(self, *args: Any) -> None:
        """Log niveau PANIC. Le writer de production lève PanicError."""
        self.log(Level.PANIC, *args)

    def panicf(self, template: str, *args: Any) -> None:
        self.logf(Level.PANIC, template, *args)

    def fatal(self, *args: Any) -> None:
        """Log niveau FATAL. Le writer de production termine le process."""
        self.log(Level.FATAL, *args)

    def fatalf(self, template: str, *args: Any) -> None:
        self.logf(Level.FATAL, template, *args)

    def log(self, level: Level, *args: Any) -> None:
        """
        Écrit une entrée si level >= niveau minimum.

        Args:
            level: Niveau de l'entrée
            *args: Éléments du message
        """
        if level < self._level:
            return
        self.writer.log(level, *args)

    def logf(self, level: Level, template: str, *args: Any) -> None:
        """
        Écrit une entrée formatée (printf) si level >= niveau minimum.

        Args:
            level: Niveau de l'entrée
            template: Format printf
            *args: Arguments du format
        """
        if level < self._level:
            return
        self.writer.logf(level, template, *args)

    def cond(self, condition: bool, true_level: Level, false_level: Level, *args: Any) -> None:
        """
        Écrit au niveau true_level si condition, sinon false_level.

        Example:
            res, err = operation_x()
            logger.cond(err is None, Level.DEBUG, Level.ERROR, "operation X done")
        """
        self.log(_conditional(condition, true_level, false_level), *args)

    def condf(
        self,
        condition: bool,
        true_level: Level,
        false_level: Level,
        template: str,
        *args: Any,
    ) -> None:
        """Variante formatée de cond."""
        self.logf(_conditional(condition, true_level, false_level), template, *args)

    def with_fields(self, *fields: Any) -> "Logger":
        """
        Retourne un Logger dont toutes les entrées portent ces champs.

        Args:
            *fields: Clés et valeurs alternées
        """
        return self._clone(self.writer.with_fields(*fields))

    def with_middleware(self, *middlewares: CtxMiddleware) -> "Logger":
        """Retourne un Logger avec des middlewares de contexte en plus."""
        return Logger(
            self._writer,
            self._level,
            self._ctx_middlewares + tuple(middlewares),
        )

    def with_context(self, ctx: Optional[contextvars.Context] = None) -> "Logger":
        """
        Retourne un Logger enrichi des champs extraits du contexte.

        Les middlewares sont exécutés dans l'ordre d'enregistrement et
        leurs champs concaténés. Sans aucun champ, retourne ce Logger.

        Args:
            ctx: Contexte de la requête, le contexte courant si None
        """
        if ctx is None:
            ctx = contextvars.copy_context()

        fields = []
        for middleware in self._ctx_middlewares:
            fields.extend(middleware(ctx))

        if not fields:
            return self
        return self.with_fields(*fields)

    def with_error(self, err: BaseException) -> "Logger":
        """Ajoute l'erreur comme champ "error"."""
        return self.with_fields("error", err)

    def sync(self) -> None:
        """Vide les buffers du writer."""
        self.writer.sync()

    def _clone(self, writer: Writer) -> "Logger":
        return Logger(writer, self._level, self._ctx_middlewares)


def _conditional(condition: bool, true_level: Level, false_level: Level) -> Level:
    if not condition:
        return false_level
    return true_level


def new_with_writer(config: Config, writer: Writer) -> Logger:
    """
    Crée un Logger autour d'un writer quelconque.

    Les middlewares de la config sont suivis de DEFAULT_MIDDLEWARES,
    sauf si config.skip_default_middlewares.

    Args:
        config: Configuration (level, middlewares)
        writer: Writer à utiliser (Recorder, NoOpWriter, ...)
    """
    middlewares = tuple(config.ctx_middlewares)
    if not config.skip_default_middlewares:
        middlewares += DEFAULT_MIDDLEWARES
    return Logger(writer, config.level, middlewares)


def new(config: Config) -> Logger:
    """
    Crée un Logger avec le writer de production structlog.

    Raises:
        WriterConstructionError: Si le writer ne peut pas être construit
    """
    return new_with_writer(config, new_structlog_writer(config))


def try_new(config: Config) -> Tuple[Logger, Optional[WriterConstructionError]]:
    """
    Comme new, mais retourne l'erreur au lieu de la lever.

    Returns:
        (logger, None) en cas de succès, (Logger(), erreur) sinon
    """
    try:
        return new(config), None
    except WriterConstructionError as e:
        return Logger(), e


def must(logger: Logger, err: Optional[BaseException]) -> Logger:
    """
    Retourne le logger, ou lève l'erreur de construction.

    Usage: logger = must(*try_new(config))
    """
    if err is not None:
        raise err
    return logger


def new_noop_logger() -> Logger:
    """
    Crée un Logger avec le writer no-op.

    Deprecated: Logger() est équivalent.
    """
    warnings.warn(
        "new_noop_logger is deprecated, use Logger() instead",
        DeprecationWarning,
        stacklevel=2,
    )
    return new_with_writer(Config(), NOOP_WRITER)
