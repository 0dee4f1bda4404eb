"""Client for the remote LaTeX-to-PDF compilation service."""
import logging
import os
import re

import requests
from bs4 import BeautifulSoup

from .base import BaseProvider
from ..exceptions import CompilationError, ValidationError

logger = logging.getLogger(__name__)

MAX_LOG_CHARS = 500


def clean_compiler_log(raw: str) -> str:
    """Reduce a compiler error page to the LaTeX error line.

    HTML is stripped first. The first line starting with ``!`` (where TeX
    reports errors) is returned; otherwise the first 500 characters.
    """
    text = BeautifulSoup(raw or "", "html.parser").get_text()
    match = re.search(r"!(.*)", text)
    cleaned = match.group(0) if match else text[:MAX_LOG_CHARS]
    return cleaned.strip()


class LatexCompiler(BaseProvider):
    """Compiles LaTeX documents to PDF through a TeXLive CGI endpoint."""

    def __init__(self, config, session: requests.Session = None):
        """Initialize compiler client.

        Args:
            config: Configuration object with compiler_url and compiler_timeout
            session: Optional requests session
        """
        super().__init__(config)
        self.url = config.compiler_url
        self.timeout = config.compiler_timeout
        self.session = session or requests.Session()

    def compile(self, latex: str) -> bytes:
        """Compile a LaTeX document.

        Args:
            latex: Complete LaTeX source

        Returns:
            PDF bytes

        Raises:
            ValidationError: If the document is empty
            CompilationError: If the service rejects the document or cannot be reached
        """
        if not latex or not latex.strip():
            raise ValidationError("LaTeX code is missing.")

        form = [
            ("filecontents[]", (None, latex)),
            ("filename[]", (None, "document.tex")),
            ("engine", (None, "pdflatex")),
            ("return", (None, "pdf")),
        ]

        logger.info(f"Sending {len(latex)} chars of LaTeX to {self.url}")
        try:
            response = self.session.post(self.url, files=form, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Compilation request failed: {e}")
            raise CompilationError(f"Proxy error: {e}")

        content_type = response.headers.get("content-type", "")
        if not response.ok or "application/pdf" not in content_type:
            log = clean_compiler_log(response.text)
            logger.error(f"Compilation failed with status {response.status_code}")
            raise CompilationError(f"Compilation failed:\n{log}", log=log)

        logger.info(f"Compiled PDF: {len(response.content)} bytes")
        return response.content

    def compile_to_file(self, latex: str, output_path: str) -> str:
        """Compile and write the PDF to ``output_path``.

        Returns:
            Path to the written PDF
        """
        pdf = self.compile(latex)

        directory = os.path.dirname(output_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(output_path, "wb") as f:
            f.write(pdf)

        logger.info(f"✓ PDF saved: {output_path}")
        return output_path
