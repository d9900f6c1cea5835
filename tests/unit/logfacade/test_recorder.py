"""
Tests unitaires pour logfacade - Recorder
"""

import threading

import pytest

from logfacade import Level, LogEntry, Logger, Recorder
from logfacade.interfaces import format_message


class TestRecorderEntries:
    """Tests enregistrement des entrées."""

    def test_log_records_entry(self, recorder: Recorder) -> None:
        """log() enregistre niveau et arguments sans template."""
        recorder.log(Level.INFO, "hello", 42)

        assert recorder.entries == (
            LogEntry(level=Level.INFO, template="", args=("hello", 42), fields=()),
        )

    def test_logf_records_template(self, recorder: Recorder) -> None:
        """logf() enregistre le template."""
        recorder.logf(Level.ERROR, "failed after %d tries", 3)

        entry = recorder.entries[0]
        assert entry.level == Level.ERROR
        assert entry.template == "failed after %d tries"
        assert entry.args == (3,)

    def test_entries_in_emission_order(self, recorder: Recorder) -> None:
        """Entrées dans l'ordre d'émission."""
        recorder.log(Level.DEBUG, "first")
        recorder.log(Level.FATAL, "second")
        recorder.log(Level.INFO, "third")

        assert [e.args[0] for e in recorder.entries] == ["first", "second", "third"]

    def test_panic_and_fatal_are_inert(self, recorder: Recorder) -> None:
        """panic et fatal n'ont aucun effet de bord."""
        recorder.log(Level.PANIC, "boom")
        recorder.logf(Level.FATAL, "bye %s", "now")

        assert len(recorder.entries) == 2

    def test_entries_by_level(self, recorder: Recorder) -> None:
        """Filtre par niveau."""
        recorder.log(Level.INFO, "a")
        recorder.log(Level.ERROR, "b")
        recorder.log(Level.INFO, "c")

        infos = recorder.entries_by_level(Level.INFO)
        assert [e.args[0] for e in infos] == ["a", "c"]

    def test_reset(self, recorder: Recorder) -> None:
        """reset() efface entrées et flag sync."""
        child = recorder.with_fields("k", "v")
        child.log(Level.INFO, "a")
        child.sync()

        recorder.reset()

        assert recorder.entries == ()
        assert recorder.sync_called is False


class TestRecorderChain:
    """Tests chaîne de recorders dérivés."""

    def test_with_fields_accumulates_parent_first(self, recorder: Recorder) -> None:
        """Champs du parent avant ceux de l'enfant."""
        child = recorder.with_fields("a", 1).with_fields("b", 2)
        child.log(Level.INFO, "msg")

        assert recorder.entries[0].fields == ("a", 1, "b", 2)

    def test_with_fields_does_not_modify_parent(self, recorder: Recorder) -> None:
        """Le parent garde ses champs."""
        parent = recorder.with_fields("a", 1)
        parent.with_fields("b", 2)
        parent.log(Level.INFO, "msg")

        assert recorder.entries[0].fields == ("a", 1)

    def test_child_entries_go_to_root(self, recorder: Recorder) -> None:
        """Entrées des descendants visibles depuis la racine, dans l'ordre."""
        child = recorder.with_fields("scope", "child")
        grandchild = child.with_fields("scope", "grandchild")

        grandchild.log(Level.INFO, "1")
        recorder.log(Level.INFO, "2")
        child.log(Level.INFO, "3")

        assert [e.args[0] for e in recorder.entries] == ["1", "2", "3"]
        assert grandchild.entries == recorder.entries
        assert child.entries == recorder.entries

    def test_root_resolution(self, recorder: Recorder) -> None:
        """Chaque noeud résout la même racine."""
        child = recorder.with_fields("a", 1)
        grandchild = child.with_fields("b", 2)

        assert recorder.parent is None
        assert grandchild.parent is child
        assert grandchild.root is recorder
        assert child.root is recorder

    def test_fields_snapshot_at_emission(self, recorder: Recorder) -> None:
        """Les champs enregistrés sont une copie."""
        child = recorder.with_fields("a", 1)
        child.log(Level.INFO, "before")
        child.with_fields("b", 2).log(Level.INFO, "after")

        assert recorder.entries[0].fields == ("a", 1)
        assert recorder.entries[1].fields == ("a", 1, "b", 2)

    def test_sync_called_shared(self, recorder: Recorder) -> None:
        """sync() sur un descendant visible partout."""
        child = recorder.with_fields("a", 1)
        sibling = recorder.with_fields("b", 2)

        assert recorder.sync_called is False
        child.with_fields("c", 3).sync()

        assert recorder.sync_called is True
        assert sibling.sync_called is True

    def test_concurrent_logging(self, recorder: Recorder) -> None:
        """Aucune entrée perdue entre threads."""

        def worker(n: int) -> None:
            writer = recorder.with_fields("worker", n)
            for i in range(200):
                writer.log(Level.INFO, i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(recorder.entries) == 8 * 200


class TestRecorderDump:
    """Tests rendu lisible."""

    def test_dump_args_and_fields(self, recorder: Recorder) -> None:
        """Arguments entre crochets, champs entre accolades."""
        recorder.with_fields("k", "v").log(Level.DEBUG, "a", 1)

        assert recorder.dump() == b"[debug  ] [a, 1] {k, v}\n"

    def test_dump_template(self, recorder: Recorder) -> None:
        """Template interpolé."""
        recorder.logf(Level.WARNING, "%s took %dms", "query", 12)

        assert recorder.dump() == b"[warning] query took 12ms {}\n"

    def test_dump_template_without_args(self, recorder: Recorder) -> None:
        """Template sans argument rendu tel quel."""
        recorder.logf(Level.INFO, "100% done")

        assert recorder.dump() == b"[info   ] 100% done {}\n"

    def test_dump_without_args(self, recorder: Recorder) -> None:
        """Sans argument: ni crochets ni message."""
        recorder.log(Level.ERROR)

        assert recorder.dump() == b"[error  ] {}\n"

    def test_dump_multiple_entries(self, recorder: Recorder) -> None:
        """Une ligne par entrée."""
        recorder.log(Level.INFO, "x")
        recorder.with_fields("error", ValueError("bad")).log(Level.FATAL, "y")

        assert recorder.dump() == b"[info   ] [x] {}\n[fatal  ] [y] {error, bad}\n"

    def test_dump_empty(self, recorder: Recorder) -> None:
        """Recorder vide → bytes vides."""
        assert recorder.dump() == b""

    def test_dump_mismatched_template(self, recorder: Recorder, recorded_logger: Logger) -> None:
        """Template incompatible: rendu sans lever, entrées suivantes comprises."""
        recorded_logger.infof("no placeholder", "extra")
        recorded_logger.errorf("count=%d", "abc")
        recorded_logger.info("next")

        assert recorder.dump() == (
            b"[info   ] no placeholder ('extra',) {}\n"
            b"[error  ] count=%d ('abc',) {}\n"
            b"[info   ] [next] {}\n"
        )


class TestFormatMessage:
    """Tests interpolation printf tolérante."""

    def test_interpolates(self) -> None:
        """Arguments conformes interpolés."""
        assert format_message("%s=%d", ("n", 3)) == "n=3"

    def test_without_args(self) -> None:
        """Sans argument: template tel quel."""
        assert format_message("100%", ()) == "100%"

    @pytest.mark.parametrize(
        "template, args, expected",
        [
            ("no placeholder", ("extra",), "no placeholder ('extra',)"),
            ("count=%d", ("abc",), "count=%d ('abc',)"),
            ("%s and %s", ("one",), "%s and %s ('one',)"),
            ("%(key)s", ("x",), "%(key)s ('x',)"),
            ("50% off %s", ("now",), "50% off %s ('now',)"),
        ],
    )
    def test_mismatch_falls_back(self, template: str, args: tuple, expected: str) -> None:
        """Arguments incompatibles: template suivi des arguments."""
        assert format_message(template, args) == expected
