"""
logfacade - Structlog Writer

Writer de production: adapte les appels du facade sur structlog.

Deux presets selon Config.log:
- "Dev": rendu console coloré, lisible par un humain
- autre: une ligne JSON par entrée (clés ts, level, logger, caller,
  msg, stacktrace) enrichie des métadonnées du process
"""

import os
import platform
import socket
import sys
import threading
from typing import IO, Any, Dict, List, Optional, Tuple

import structlog
from structlog.processors import CallsiteParameter
from structlog.types import EventDict, Processor

from .config import Config
from .interfaces import Level, LogFacadeError, Writer, format_message
from .secret_mask import secret_mask

STDOUT = "stdout"
STDERR = "stderr"
_FILE_SCHEME = "file://"

# Frames ignorées pour trouver l'appelant: le call site reporté est
# celui de l'application, pas celui du facade. structlog compare par
# préfixe: le point exclut les modules voisins (logfacade_client, ...).
_IGNORED_MODULES = [__name__.rpartition(".")[0] + "."]


class WriterConstructionError(LogFacadeError):
    """Le writer de production ne peut pas être construit."""

    pass


class PanicError(LogFacadeError):
    """Levée après l'écriture d'une entrée de niveau panic."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class _OutputSink:
    """
    Logger structlog qui écrit chaque ligne rendue sur toutes les
    destinations.

    stdout et stderr sont résolus à l'écriture; les fichiers sont
    ouverts en ajout à la construction.
    """

    def __init__(self, output_paths: List[str]) -> None:
        self._lock = threading.Lock()
        self._destinations: List[Tuple[str, Optional[IO[str]]]] = []
        try:
            for path in output_paths:
                self._destinations.append((path, self._open(path)))
        except OSError:
            self.close()
            raise

    @staticmethod
    def _open(path: str) -> Optional[IO[str]]:
        if path in (STDOUT, STDERR):
            return None
        if path.startswith(_FILE_SCHEME):
            path = path[len(_FILE_SCHEME):]
        return open(path, "a", encoding="utf-8")

    def _streams(self) -> List[IO[str]]:
        streams = []
        for path, f in self._destinations:
            if f is not None:
                streams.append(f)
            elif path == STDERR:
                streams.append(sys.stderr)
            else:
                streams.append(sys.stdout)
        return streams

    def msg(self, message: str) -> None:
        with self._lock:
            for stream in self._streams():
                stream.write(message + "\n")
                stream.flush()

    debug = info = warning = error = panic = fatal = msg

    def flush(self) -> None:
        with self._lock:
            for stream in self._streams():
                stream.flush()

    def close(self) -> None:
        with self._lock:
            for _, f in self._destinations:
                if f is not None and not f.closed:
                    f.close()


def _add_caller(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Regroupe filename et lineno dans un champ caller "fichier:ligne"."""
    filename = event_dict.pop("filename", None)
    lineno = event_dict.pop("lineno", None)
    if filename is not None:
        event_dict["caller"] = f"{filename}:{lineno}"
    return event_dict


def _request_stack(min_level: Level) -> Processor:
    """Demande la stack trace aux entrées de niveau >= min_level."""

    def processor(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        if Level.from_string(method_name) >= min_level:
            event_dict["stack_info"] = True
        return event_dict

    return processor


def _rename_stack(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    if "stack" in event_dict:
        event_dict["stacktrace"] = event_dict.pop("stack")
    return event_dict


def _mask_secrets(logger: Any, method_name: str, rendered: str) -> str:
    return secret_mask(rendered.encode("utf-8")).decode("utf-8")


def _callsite_adder() -> Processor:
    return structlog.processors.CallsiteParameterAdder(
        parameters=[CallsiteParameter.FILENAME, CallsiteParameter.LINENO],
        additional_ignores=_IGNORED_MODULES,
    )


def _development_processors(config: Config) -> List[Processor]:
    level_styles = structlog.dev.ConsoleRenderer.get_default_level_styles(colors=True)
    level_styles["panic"] = level_styles["critical"]
    level_styles["fatal"] = level_styles["critical"]

    processors: List[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _callsite_adder(),
        _add_caller,
    ]
    if not config.disable_stacktrace:
        processors += [
            _request_stack(Level.WARNING),
            structlog.processors.StackInfoRenderer(additional_ignores=_IGNORED_MODULES),
        ]
    processors.append(
        structlog.dev.ConsoleRenderer(colors=True, level_styles=level_styles)
    )
    return processors


def _production_processors(config: Config) -> List[Processor]:
    processors: List[Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="ts"),
        _callsite_adder(),
        _add_caller,
    ]
    if not config.disable_stacktrace:
        processors += [
            _request_stack(Level.ERROR),
            structlog.processors.StackInfoRenderer(additional_ignores=_IGNORED_MODULES),
            _rename_stack,
        ]
    processors += [
        structlog.processors.EventRenamer("msg"),
        structlog.processors.JSONRenderer(),
    ]
    return processors


def _process_fields() -> Dict[str, Any]:
    """Métadonnées du process; hostname omis si non résolvable."""
    fields: Dict[str, Any] = {
        "python_version": platform.python_version(),
        "pid": os.getpid(),
    }
    try:
        fields["hostname"] = socket.gethostname()
    except OSError:
        pass
    return fields


def _pair_fields(fields: Tuple[Any, ...]) -> Tuple[Dict[str, Any], List[Any]]:
    """Apparie les clés/valeurs alternées; retourne aussi la clé orpheline."""
    pairs: Dict[str, Any] = {}
    for i in range(0, len(fields) - 1, 2):
        pairs[str(fields[i])] = fields[i + 1]
    dangling = [fields[-1]] if len(fields) % 2 else []
    return pairs, dangling


class StructlogWriter(Writer):
    """
    Writer de production basé sur structlog.

    Tous les writers dérivés par with_fields() partagent la même
    destination. Après l'écriture, une entrée panic lève PanicError
    et une entrée fatal vide les buffers puis termine le process
    (sys.exit(1)).

    Example:
        writer = new_structlog_writer(Config(log="Dev"))
        writer.with_fields("user", "u-1").log(Level.INFO, "login")
    """

    def __init__(
        self,
        sink: _OutputSink,
        processors: List[Processor],
        context: Dict[str, Any],
    ) -> None:
        self._sink = sink
        self._processors = processors
        self._context = context
        # Contexte passé en dict: les clés des champs ne sont jamais
        # des arguments nommés.
        self._logger = structlog.BoundLogger(sink, processors, dict(context))

    @property
    def context(self) -> Dict[str, Any]:
        """Champs liés à ce writer."""
        return dict(self._context)

    def with_fields(self, *fields: Any) -> Writer:
        pairs, dangling = _pair_fields(fields)
        if dangling:
            self._logger.error("Ignored key without a value.", ignored=dangling[0])
        context = dict(self._context)
        context.update(pairs)
        return StructlogWriter(self._sink, self._processors, context)

    def log(self, level: Level, *args: Any) -> None:
        self._write(level, " ".join(str(a) for a in args))

    def logf(self, level: Level, template: str, *args: Any) -> None:
        self._write(level, format_message(template, args))

    def sync(self) -> None:
        self._sink.flush()

    def close(self) -> None:
        """Ferme les fichiers ouverts par ce writer."""
        self._sink.close()

    def _write(self, level: Level, message: str) -> None:
        getattr(self._logger, str(level))(message)
        if level == Level.PANIC:
            raise PanicError(message)
        if level == Level.FATAL:
            self.sync()
            sys.exit(1)


def new_structlog_writer(config: Config) -> StructlogWriter:
    """
    Construit le writer de production selon le preset de la config.

    Args:
        config: Configuration du logger

    Returns:
        StructlogWriter prêt à écrire

    Raises:
        WriterConstructionError: Si une destination ne peut pas être ouverte
    """
    output_paths = config.output_paths if config.output_paths is not None else [STDOUT]
    try:
        sink = _OutputSink(output_paths)
    except OSError as e:
        raise WriterConstructionError(f"Cannot open log output: {e}") from e

    if config.is_development:
        processors = _development_processors(config)
        initial_fields: Dict[str, Any] = {}
    else:
        processors = _production_processors(config)
        initial_fields = _process_fields()

    if config.name:
        initial_fields["logger"] = config.name
    if config.mask_secrets:
        processors.append(_mask_secrets)

    return StructlogWriter(sink, processors, initial_fields)
