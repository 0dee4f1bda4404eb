"""Academic paper generation, review and refinement."""
import json
import logging
import re
from typing import List, Optional

from ..converters.latex import (
    extract_latex_from_response,
    extract_strategic_context,
    post_process_latex,
    strip_latex_comments,
)
from ..exceptions import LLMError, ValidationError
from .models import AnalysisResult, Author, GeneratedPaper

logger = logging.getLogger(__name__)

LANGUAGES = {
    "en": "English",
    "pt": "Portuguese",
    "es": "Spanish",
    "fr": "French",
}

REFERENCE_COUNT = 10
IMPROVEMENT_THRESHOLD = 8.5

ANALYSIS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "analysis": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "topicNum": {"type": "NUMBER"},
                    "score": {"type": "NUMBER"},
                    "improvement": {"type": "STRING"},
                },
                "required": ["topicNum", "score", "improvement"],
            },
        },
    },
    "required": ["analysis"],
}


def language_name(code: str) -> str:
    """Human-readable language name for a language code (English if unknown)."""
    return LANGUAGES.get(code, "English")


class PaperGenerator:
    """Generates and refines LaTeX papers using an LLM provider."""

    def __init__(self, llm_provider, config):
        """Initialize paper generator.

        Args:
            llm_provider: LLM provider instance (e.g., GeminiProvider)
            config: Configuration object
        """
        self.llm_provider = llm_provider
        self.config = config

    def generate_title(
        self,
        topic: str,
        language: str = "en",
        model: str = "flash",
        discipline: str = "",
    ) -> str:
        """Generate a paper title for a topic.

        Args:
            topic: Research topic
            language: Language code
            model: Tier or model name
            discipline: Academic discipline

        Returns:
            Title without quotes
        """
        system_instruction = (
            "Act as an expert academic researcher. "
            "Generate a single, compelling, high-impact scientific paper title."
        )
        field = f" in {discipline}" if discipline else ""
        prompt = (
            f'Topic: "{topic}"{field}. Language: **{language_name(language)}**. '
            "Return ONLY the title text. No quotes."
        )

        logger.info(f"Generating title for topic: '{topic}'")
        text = self.llm_provider.generate(prompt, model=model, system_instruction=system_instruction)
        return text.strip().replace('"', "")

    def generate_paper(
        self,
        title: str,
        language: str = "en",
        model: str = "pro",
        authors: Optional[List[Author]] = None,
    ) -> GeneratedPaper:
        """Write a complete LaTeX paper for a title, grounded with web search.

        Args:
            title: Paper title
            language: Language code
            model: Tier or model name
            authors: Authors to list on the paper

        Returns:
            GeneratedPaper with cleaned LaTeX and grounding sources
        """
        lang = language_name(language)
        author_lines = "\n".join(
            f"- {a.name}" + (f" ({a.affiliation})" if a.affiliation else "")
            + (f", ORCID {a.orcid}" if a.orcid else "")
            for a in (authors or [])
        ) or "- (no authors given; use \\author{})"

        system_instruction = f"""Act as a world-class LaTeX scientific paper generator. Write a complete, rigorous paper in **{lang}**.

**FORMATTING RULES (STRICT):**
1.  **Title**: Use exactly \\title{{{title}}}.
2.  **Keywords**: Use exactly \\keywords{{key1, key2, key3}} and define the command once in the preamble.
3.  **Figures**: Do not include figures or images.
4.  **Citations**: Generate {REFERENCE_COUNT} academic references as plain text paragraphs at the end.
5.  Return a complete, compilable pdflatex document starting with \\documentclass."""

        prompt = f"""Generate the paper for the title: "{title}".

Authors:
{author_lines}

Return the document in a ```latex code block."""

        logger.info(f"Generating paper: '{title}'")
        response = self.llm_provider.generate_content(
            model, system_instruction, prompt, google_search=True
        )
        text = self.llm_provider.response_text(response)
        latex = extract_latex_from_response(text)
        if not latex:
            raise LLMError("Gemini returned an empty paper")

        sources = self.llm_provider.grounding_sources(response)
        logger.info(f"Generated paper: {len(latex)} chars, {len(sources)} sources")
        return GeneratedPaper(title=title, latex=post_process_latex(latex), sources=sources)

    def analyze_paper(self, latex: str, model: str = "flash") -> AnalysisResult:
        """Score a paper against the review criteria.

        Args:
            latex: Paper source
            model: Tier or model name

        Returns:
            AnalysisResult

        Raises:
            ValidationError: If the model's JSON cannot be parsed
        """
        system_instruction = (
            "Analyze the LaTeX paper against 28 criteria. Score 0-10. Return ONLY valid JSON: "
            '{ "analysis": [ { "topicNum": number, "score": number, "improvement": string } ] }'
        )
        context, truncated = extract_strategic_context(strip_latex_comments(latex))
        if truncated:
            logger.info("Analyzing abstract, introduction and conclusion only")

        text = self.llm_provider.generate(
            context,
            model=model,
            system_instruction=system_instruction,
            json_output=True,
            response_schema=ANALYSIS_SCHEMA,
        )
        return self.parse_analysis(text)

    @staticmethod
    def parse_analysis(text: str) -> AnalysisResult:
        """Parse the model's JSON analysis, tolerating ```json fences."""
        cleaned = re.sub(r"^```(?:json)?", "", text.strip(), flags=re.IGNORECASE)
        cleaned = re.sub(r"```$", "", cleaned).strip()
        try:
            data = json.loads(cleaned)
            return AnalysisResult.from_dict(data)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ValidationError(f"Could not parse paper analysis: {e}")

    def improve_paper(
        self,
        latex: str,
        analysis: AnalysisResult,
        language: str = "en",
        model: str = "flash",
    ) -> str:
        """Rewrite a paper using the weak points of an analysis.

        Refinement always runs on the flash tier; ``model`` is accepted for
        symmetry with the other calls.

        Returns:
            Improved LaTeX
        """
        points = "\n".join(
            f"- Topic {item.topic_num}: {item.improvement}"
            for item in analysis.weak_points(IMPROVEMENT_THRESHOLD)
        )
        if not points:
            logger.info("All criteria already score well; nothing to improve")
            return latex

        system_instruction = (
            f"Refine the LaTeX paper body based on suggestions. Write in {language_name(language)}. "
            "Return ONLY the body content starting with \\begin{document}."
        )
        prompt = f"Feedback:\n{points}\n\nContent:\n{latex}"

        logger.info(f"Improving paper on {len(analysis.weak_points(IMPROVEMENT_THRESHOLD))} criteria")
        text = self.llm_provider.generate(prompt, model="flash", system_instruction=system_instruction)
        improved = extract_latex_from_response(text)

        doc_start = latex.find("\\begin{document}")
        if doc_start != -1 and "\\documentclass" not in improved:
            return post_process_latex(latex[:doc_start] + "\n" + improved)
        return post_process_latex(improved)
