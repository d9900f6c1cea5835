"""
logfacade - Interfaces

Contrats du facade de logging structuré:
- Niveaux de sévérité ordonnés (debug < info < warning < error < panic < fatal)
- Writer: destination interchangeable des entrées (production, no-op, recorder)
- Middlewares de contexte: extraction de champs depuis un contexte de requête
"""

import contextvars
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, List, Tuple


# ══════════════════════════════════════════════════════════════════════════════
# TYPES
# ══════════════════════════════════════════════════════════════════════════════


class LogFacadeError(Exception):
    """Erreur de base du facade de logging."""

    pass


_LEVEL_NAMES: Tuple[str, ...] = ("debug", "info", "warning", "error", "panic", "fatal")


class Level(IntEnum):
    """
    Niveaux de log.

    Ordre de sévérité: DEBUG < INFO < WARNING < ERROR < PANIC < FATAL.
    La comparaison se fait directement sur la valeur entière.
    """

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    PANIC = 4
    FATAL = 5

    def __str__(self) -> str:
        return _LEVEL_NAMES[self.value]

    @classmethod
    def from_string(cls, level: str) -> "Level":
        """
        Retourne le niveau correspondant à sa représentation texte.

        La comparaison est case-insensitive. Un niveau inconnu
        retourne DEBUG (pas d'erreur).

        Args:
            level: Nom du niveau ("debug", "INFO", ...)

        Returns:
            Level correspondant ou DEBUG
        """
        try:
            return cls(_LEVEL_NAMES.index(level.lower()))
        except ValueError:
            return cls.DEBUG


def level_from_string(level: str) -> Level:
    """Voir Level.from_string."""
    return Level.from_string(level)


def format_message(template: str, args: Tuple[Any, ...]) -> str:
    """
    Interpole un template printf sans jamais lever.

    Sans argument, le template est retourné tel quel. Si les arguments
    ne correspondent pas au template, retourne le template suivi des
    arguments.

    Args:
        template: Format printf
        args: Arguments du format

    Returns:
        Message formaté
    """
    if not args:
        return template
    try:
        return template % args
    except (TypeError, ValueError, KeyError):
        return f"{template} {args!r}"


# Un middleware reçoit le contexte de la requête et retourne une liste
# clé/valeur alternée à ajouter aux entrées.
CtxMiddleware = Callable[[contextvars.Context], List[Any]]


@dataclass(frozen=True)
class LogEntry:
    """
    Entrée enregistrée par le Recorder.

    template est vide quand l'entrée vient de log() (pas de format).
    fields est une copie des champs liés au moment de l'émission.
    """

    level: Level
    template: str
    args: Tuple[Any, ...]
    fields: Tuple[Any, ...]


# ══════════════════════════════════════════════════════════════════════════════
# INTERFACES
# ══════════════════════════════════════════════════════════════════════════════


class Writer(ABC):
    """
    Destination des entrées de log.

    Chaque with_fields() retourne un writer enfant qui partage la même
    destination sous-jacente; les champs s'accumulent parent d'abord.
    """

    @abstractmethod
    def with_fields(self, *fields: Any) -> "Writer":
        """
        Retourne un writer enfant avec des champs supplémentaires.

        Args:
            *fields: Clés et valeurs alternées
        """
        pass

    @abstractmethod
    def log(self, level: Level, *args: Any) -> None:
        """Écrit une entrée composée des arguments positionnels."""
        pass

    @abstractmethod
    def logf(self, level: Level, template: str, *args: Any) -> None:
        """Écrit une entrée formatée façon printf."""
        pass

    @abstractmethod
    def sync(self) -> None:
        """Vide les buffers de la destination."""
        pass
