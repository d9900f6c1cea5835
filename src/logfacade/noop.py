"""
logfacade - No-op Writer

Writer qui ignore toutes les entrées. Utilisé par défaut par un
Logger sans writer.
"""

from typing import Any

from .interfaces import Level, Writer


class NoOpWriter(Writer):
    """
    Writer inerte.

    Sans état: une seule instance (NOOP_WRITER) est partagée par tous
    les loggers sans writer, y compris entre threads. Les niveaux panic
    et fatal n'ont aucun effet.
    """

    def with_fields(self, *fields: Any) -> Writer:
        return self

    def log(self, level: Level, *args: Any) -> None:
        pass

    def logf(self, level: Level, template: str, *args: Any) -> None:
        pass

    def sync(self) -> None:
        pass


NOOP_WRITER = NoOpWriter()
