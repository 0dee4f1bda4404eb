"""Main PaperPress class - entry point for the library."""
import logging
from typing import List, Optional

from .config import Config
from .core.credentials import CredentialPool
from .core.models import AnalysisResult, Author, GeneratedPaper
from .core.paper import PaperGenerator
from .core.settings import SettingsStore
from .providers.compiler import LatexCompiler
from .providers.llm.gemini import GeminiProvider
from .providers.zenodo import ZenodoClient
from .utils.logging import setup_logging, mask_credential

logger = logging.getLogger(__name__)


class PaperPress:
    """Main entry point for PaperPress.

    Example:
        >>> from paperpress import PaperPress
        >>> press = PaperPress()
        >>> press.add_api_key("your-key")
        >>> title = press.generate_title("Graph neural networks", discipline="Chemistry")
        >>> paper = press.generate_paper(title)
        >>> press.compile(paper.latex, "output/paper.pdf")
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        gemini_api_key: Optional[str] = None,
        zenodo_token: Optional[str] = None,
        log_level: int = logging.INFO,
        pool: Optional[CredentialPool] = None,
    ):
        """Initialize PaperPress.

        Args:
            config: Optional Config object (defaults to Config.from_env())
            gemini_api_key: Default Gemini API key, used when none are stored
            zenodo_token: Zenodo access token
            log_level: Logging level (default: INFO)
            pool: Optional pre-built credential pool
        """
        setup_logging(level=log_level)

        if config is None:
            config = Config.from_env()

        if gemini_api_key:
            config.gemini_api_key = gemini_api_key
        if zenodo_token:
            config.zenodo_token = zenodo_token

        self.config = config

        if pool is None:
            pool = CredentialPool(
                SettingsStore(config.settings_path),
                default_credential=config.gemini_api_key,
            )
        self.pool = pool

        self.llm_provider = GeminiProvider(config, pool=pool)
        self.generator = PaperGenerator(self.llm_provider, config)
        self.compiler = LatexCompiler(config)
        self.publisher = ZenodoClient(config)

        logger.info("PaperPress initialized")

    # API keys

    def api_keys(self) -> List[str]:
        """Return the keys currently in the pool, masked."""
        self.pool.reload()
        return [mask_credential(k) for k in self.pool.credentials]

    def add_api_key(self, api_key: str) -> bool:
        """Store a Gemini API key. Returns False if it was already stored."""
        return self.pool.add(api_key)

    def remove_api_key(self, api_key: str) -> bool:
        """Remove a stored Gemini API key. Returns False if it was not stored."""
        return self.pool.remove(api_key)

    # Generation

    def generate_title(
        self,
        topic: str,
        language: Optional[str] = None,
        model: str = "flash",
        discipline: str = "",
    ) -> str:
        """Generate a paper title for a topic."""
        return self.generator.generate_title(
            topic, language or self.config.default_language, model, discipline
        )

    def generate_paper(
        self,
        title: str,
        language: Optional[str] = None,
        model: str = "pro",
        authors: Optional[List[Author]] = None,
    ) -> GeneratedPaper:
        """Generate a LaTeX paper for a title."""
        return self.generator.generate_paper(
            title, language or self.config.default_language, model, authors
        )

    def analyze_paper(self, latex: str, model: str = "flash") -> AnalysisResult:
        """Score a paper against the review criteria."""
        return self.generator.analyze_paper(latex, model)

    def improve_paper(
        self,
        latex: str,
        analysis: Optional[AnalysisResult] = None,
        language: Optional[str] = None,
    ) -> str:
        """Improve a paper, analyzing it first if no analysis is given."""
        if analysis is None:
            analysis = self.analyze_paper(latex)
        return self.generator.improve_paper(
            latex, analysis, language or self.config.default_language
        )

    # Compilation and publishing

    def compile(self, latex: str, output_path: Optional[str] = None):
        """Compile LaTeX to PDF.

        Returns:
            PDF bytes, or the written path when ``output_path`` is given
        """
        if output_path:
            return self.compiler.compile_to_file(latex, output_path)
        return self.compiler.compile(latex)

    def publish(
        self,
        pdf_path: str,
        title: str,
        authors: List[Author],
        description: Optional[str] = None,
    ) -> str:
        """Publish a PDF to Zenodo and return the record URL."""
        return self.publisher.publish(pdf_path, title, authors, description)
