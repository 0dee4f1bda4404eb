"""Tests for the LaTeX compilation client."""

from unittest.mock import MagicMock

import pytest
import requests

from paperpress.config import Config
from paperpress.exceptions import CompilationError, ValidationError
from paperpress.providers.compiler import LatexCompiler, clean_compiler_log


def fake_response(status=200, content_type="application/pdf", content=b"%PDF-1.5", text=""):
    response = MagicMock()
    response.status_code = status
    response.ok = 200 <= status < 300
    response.headers = {"content-type": content_type}
    response.content = content
    response.text = text
    return response


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def compiler(session):
    return LatexCompiler(Config(settings_path=None, compiler_url="https://tex.test/cgi"), session=session)


class TestCompile:
    def test_returns_pdf_bytes(self, compiler, session):
        session.post.return_value = fake_response()

        assert compiler.compile("\\documentclass{article}") == b"%PDF-1.5"

        args, kwargs = session.post.call_args
        assert args[0] == "https://tex.test/cgi"
        fields = dict(kwargs["files"])
        assert fields["filecontents[]"] == (None, "\\documentclass{article}")
        assert fields["filename[]"] == (None, "document.tex")
        assert fields["engine"] == (None, "pdflatex")
        assert fields["return"] == (None, "pdf")

    def test_error_page_is_cleaned(self, compiler, session):
        page = (
            "<html><body><pre>This is pdfTeX\n"
            "! Undefined control sequence.\nl.5 \\foo</pre></body></html>"
        )
        session.post.return_value = fake_response(content_type="text/html", text=page)

        with pytest.raises(CompilationError) as excinfo:
            compiler.compile("\\foo")

        assert str(excinfo.value) == "Compilation failed:\n! Undefined control sequence."
        assert excinfo.value.log == "! Undefined control sequence."

    def test_http_error_status(self, compiler, session):
        session.post.return_value = fake_response(status=500, text="server exploded")
        with pytest.raises(CompilationError, match="server exploded"):
            compiler.compile("x")

    def test_network_failure(self, compiler, session):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(CompilationError, match="Proxy error"):
            compiler.compile("x")

    def test_empty_document_rejected(self, compiler, session):
        with pytest.raises(ValidationError):
            compiler.compile("  ")
        session.post.assert_not_called()

    def test_compile_to_file(self, compiler, session, tmp_path):
        session.post.return_value = fake_response(content=b"%PDF-data")
        out = tmp_path / "out" / "paper.pdf"
        assert compiler.compile_to_file("x", str(out)) == str(out)
        assert out.read_bytes() == b"%PDF-data"


class TestCleanLog:
    def test_without_error_marker_truncates(self):
        assert clean_compiler_log("a" * 800) == "a" * 500

    def test_empty(self):
        assert clean_compiler_log("") == ""
