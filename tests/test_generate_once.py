from generate_once import main
from system_prompt import REJECTION_NOTICE
from tests.fakes import FakeGenerator


class TestGenerateOnce:
    """One-shot command line."""

    def test_prints_html(self, capsys):
        generator = FakeGenerator(html="<!DOCTYPE html><h1>clock</h1>")

        assert main(["a clock"], generator=generator) == 0

        assert capsys.readouterr().out.strip() == "<!DOCTYPE html><h1>clock</h1>"
        assert generator.calls == [("a clock", None, None)]

    def test_file_and_out(self, tmp_path):
        sketch = tmp_path / "sketch.png"
        sketch.write_bytes(b"\x89PNG")
        out = tmp_path / "app.html"
        generator = FakeGenerator()

        assert main(["--file", str(sketch), "--out", str(out)], generator=generator) == 0

        assert generator.calls == [("", b"\x89PNG", "image/png")]
        assert out.read_text(encoding="utf-8") == generator.html

    def test_rejects_unsupported_file(self, tmp_path, capsys):
        notes = tmp_path / "notes.txt"
        notes.write_text("hello")
        generator = FakeGenerator()

        assert main(["--file", str(notes)], generator=generator) == 2

        assert REJECTION_NOTICE in capsys.readouterr().err
        assert generator.calls == []
