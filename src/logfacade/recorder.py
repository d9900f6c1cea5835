"""
logfacade - Recorder

Writer en mémoire qui enregistre toutes les entrées émises, pour
vérifier dans les tests que les bonnes entrées sont loggées.
"""

import threading
from typing import Any, List, Optional, Tuple

from .interfaces import Level, LogEntry, Writer, format_message


class _RecorderStorage:
    """Entrées et flag sync partagés par toute la chaîne de recorders."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.entries: List[LogEntry] = []
        self.sync_called = False


class Recorder(Writer):
    """
    Writer d'enregistrement pour les tests.

    Chaque with_fields() crée un noeud enfant qui référence son parent
    et le stockage de la racine. Les entrées de tous les descendants
    sont ajoutées, dans l'ordre d'émission, au stockage unique de la
    racine. Aucune I/O, et panic/fatal n'ont aucun effet.

    Example:
        rec = Recorder()
        logger = new_with_writer(Config(), rec)
        logger.with_fields("user", "u-1").info("login")
        assert rec.entries[0].fields == ("user", "u-1")
    """

    def __init__(self) -> None:
        self._fields: Tuple[Any, ...] = ()
        self._parent: Optional["Recorder"] = None
        self._storage = _RecorderStorage()

    @property
    def fields(self) -> Tuple[Any, ...]:
        """Champs liés à ce noeud (parents compris)."""
        return self._fields

    @property
    def parent(self) -> Optional["Recorder"]:
        """Recorder qui a créé ce noeud, None pour la racine."""
        return self._parent

    @property
    def root(self) -> "Recorder":
        """Recorder racine de la chaîne."""
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def with_fields(self, *fields: Any) -> Writer:
        child = Recorder()
        child._fields = self._fields + tuple(fields)
        child._parent = self
        child._storage = self._storage
        return child

    def log(self, level: Level, *args: Any) -> None:
        self._record(level, "", args)

    def logf(self, level: Level, template: str, *args: Any) -> None:
        self._record(level, template, args)

    def sync(self) -> None:
        with self._storage.lock:
            self._storage.sync_called = True

    @property
    def sync_called(self) -> bool:
        """True si sync() a été appelé sur un writer de la chaîne."""
        return self._storage.sync_called

    @property
    def entries(self) -> Tuple[LogEntry, ...]:
        """Entrées enregistrées, dans l'ordre d'émission."""
        with self._storage.lock:
            return tuple(self._storage.entries)

    def entries_by_level(self, level: Level) -> List[LogEntry]:
        """
        Filtre les entrées par niveau.

        Args:
            level: Niveau à filtrer

        Returns:
            Liste des LogEntry du niveau spécifié
        """
        return [e for e in self.entries if e.level == level]

    def reset(self) -> None:
        """Efface les entrées et le flag sync de toute la chaîne."""
        with self._storage.lock:
            self._storage.entries.clear()
            self._storage.sync_called = False

    def dump(self) -> bytes:
        """
        Rendu lisible de toutes les entrées.

        Format d'une ligne:
            [level  ] message {champ, champ}

        Le message est le template interpolé s'il existe, sinon les
        arguments entre crochets séparés par des virgules.

        Returns:
            Lignes encodées en UTF-8
        """
        lines = []
        for e in self.entries:
            line = "[%-7s]" % e.level
            if e.template:
                line += " " + format_message(e.template, e.args)
            elif e.args:
                line += " [" + ", ".join(str(a) for a in e.args) + "]"
            line += " {" + ", ".join(str(f) for f in e.fields) + "}\n"
            lines.append(line)
        return "".join(lines).encode("utf-8")

    def _record(self, level: Level, template: str, args: Tuple[Any, ...]) -> None:
        entry = LogEntry(
            level=level,
            template=template,
            args=tuple(args),
            fields=tuple(self._fields),
        )
        with self._storage.lock:
            self._storage.entries.append(entry)
