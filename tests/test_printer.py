"""
Tests for the fan-out Printer.
"""

import io
import threading

import pytest
from fanlog import NOP_OUTPUT, OutputError, Printer, RichOption, configure
from fanlog.colors import CYAN, RED, rich_text, supports_color
from fanlog.printer import write_rich


class TestPrinterOutputs:
    """Test destination management and capability flags."""

    def test_write_reaches_every_destination(self):
        """Test that one write goes to all destinations."""
        first, second = io.StringIO(), io.StringIO()
        printer = Printer(first, second)

        n = printer.write("hello\n")

        assert n == 6
        assert first.getvalue() == "hello\n"
        assert second.getvalue() == "hello\n"

    def test_set_output_replaces_destinations(self):
        """Test that set_output drops the previous destinations."""
        old, new = io.StringIO(), io.StringIO()
        printer = Printer(old)

        printer.set_output(new)
        printer.write("x")

        assert old.getvalue() == ""
        assert new.getvalue() == "x"
        assert len(printer) == 1
        assert printer.rich == {0: False}

    def test_add_output_recomputes_all_flags(self, tty_stream):
        """Test that the flag map always matches the destination list."""
        printer = Printer(tty_stream)
        assert printer.rich == {0: True}

        plain = io.StringIO()
        printer.add_output(plain, NOP_OUTPUT)

        assert len(printer.rich) == len(printer) == 3
        assert printer.rich == {0: True, 1: False, 2: False}

    def test_flags_follow_color_configuration(self, tty_stream):
        """Test that disabling colors turns off rich output after a refresh."""
        printer = Printer(tty_stream)
        configure(colors=False, use_env=False)
        printer.refresh()

        assert printer.rich == {0: False}

    def test_nop_output_never_rich(self):
        """Test that a no-op sink is never considered a terminal."""
        assert supports_color(NOP_OUTPUT) is False
        assert supports_color(None) is False

    def test_binary_destination_receives_bytes(self):
        """Test that text is encoded for binary destinations."""
        binary, text = io.BytesIO(), io.StringIO()
        printer = Printer(binary, text)

        printer.write("héllo")
        printer.write(b" bytes")

        assert binary.getvalue() == "héllo bytes".encode()
        assert text.getvalue() == "héllo bytes"

    def test_empty_write_is_skipped(self, failing_stream):
        """Test that empty payloads never reach the destinations."""
        printer = Printer(failing_stream)

        assert printer.write("") == 0
        assert failing_stream.calls == 0


class TestPartialFailure:
    """Test best-effort fan-out."""

    def test_failing_destination_does_not_block_others(self, failing_stream):
        """Test that later destinations still receive the write."""
        healthy = io.StringIO()
        printer = Printer(failing_stream, healthy)

        with pytest.raises(OutputError) as exc_info:
            printer.write("payload")

        assert healthy.getvalue() == "payload"
        assert exc_info.value.written == len("payload")
        assert isinstance(exc_info.value.error, OSError)
        assert "disk full" in str(exc_info.value)

    def test_last_error_is_reported(self):
        """Test that every failure is kept and the last one is surfaced."""

        class Broken:
            def __init__(self, name):
                self.name = name

            def write(self, data):
                raise OSError(self.name)

        printer = Printer(Broken("first"), io.StringIO(), Broken("second"))

        with pytest.raises(OutputError) as exc_info:
            printer.write("x")

        assert [str(e) for e in exc_info.value.errors] == ["first", "second"]
        assert str(exc_info.value.error) == "second"
        assert exc_info.value.__cause__ is exc_info.value.error


class TestRichWrites:
    """Test rich-text aware writes."""

    def test_rich_and_plain_destinations(self, tty_stream):
        """Test that only the terminal destination gets escape codes."""
        plain = io.StringIO()
        printer = Printer(tty_stream, plain)

        printer.write_rich("[INFO]", CYAN, suffix=" hi\n")

        assert tty_stream.getvalue() == rich_text("[INFO]", CYAN) + " hi\n"
        assert "\x1b[" in tty_stream.getvalue()
        assert plain.getvalue() == "[INFO] hi\n"

    def test_styled_text_rendered_once(self, monkeypatch):
        """Test that the styled encoding is computed once for many destinations."""
        from fanlog import printer as printer_module
        from conftest import TTYStream

        calls = []

        def counting_rich_text(text, color_code, *options):
            calls.append(text)
            return f"<{text}>"

        monkeypatch.setattr(printer_module, "rich_text", counting_rich_text)
        streams = [TTYStream() for _ in range(3)]
        printer = Printer(*streams)

        printer.write_rich("[ERRO]", RED, RichOption.BOLD)

        assert calls == ["[ERRO]"]
        assert all(s.getvalue() == "<[ERRO]>" for s in streams)

    def test_rich_text_options(self):
        """Test that style options add SGR codes."""
        plain = rich_text("x", RED)
        bold = rich_text("x", RED, RichOption.BOLD)

        assert plain.startswith("\x1b[") and plain.endswith("\x1b[0m")
        assert "31" in plain
        assert bold != plain
        assert "31" in bold

    def test_write_rich_helper_on_plain_writer(self):
        """Test the module helper on a writer that is not a Printer."""
        out = io.StringIO()

        write_rich(out, "[WARN]", RED, suffix=" careful\n")

        assert out.getvalue() == "[WARN] careful\n"


class TestPrinterHelpers:
    """Test text conveniences, cloning and terminal selection."""

    def test_print_variants(self):
        """Test print, println and printf."""
        out = io.StringIO()
        printer = Printer(out)

        printer.print("a")
        printer.println(None)
        printer.printf("%s=%d\n", "n", 3)
        printer.printf("100%")

        assert out.getvalue() == "a<nil>\nn=3\n100%"

    def test_terminal_selection(self, tty_stream):
        """Test that terminal() keeps only terminal destinations."""
        printer = Printer(io.StringIO(), tty_stream)

        terminal = printer.terminal()

        assert terminal is not None
        assert terminal.writers == [tty_stream]
        assert Printer(io.StringIO()).terminal() is None

    def test_clone_copies_destination_list(self):
        """Test that a clone has its own list and clones clonable writers."""

        class Clonable(io.StringIO):
            def clone(self):
                return Clonable()

        shared, clonable = io.StringIO(), Clonable()
        printer = Printer(shared, clonable)

        clone = printer.clone()
        clone.add_output(io.StringIO())

        assert len(printer) == 2
        assert clone.writers[0] is shared
        assert clone.writers[1] is not clonable

    def test_concurrent_writes_are_not_interleaved(self):
        """Test that each write lands as a whole line."""
        out = io.StringIO()
        printer = Printer(out)

        def worker(n):
            for _ in range(200):
                printer.write(f"worker-{n}-" + "x" * 50 + "\n")

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = out.getvalue().splitlines()
        assert len(lines) == 800
        assert all(line.endswith("x" * 50) for line in lines)
