"""Cleanup helpers for model-generated LaTeX."""
import re
from typing import Tuple

LIST_ENVIRONMENTS = ("itemize", "enumerate", "description")

# CJK ideographs, kana and hangul break pdflatex without extra packages.
_CJK_RE = re.compile(
    "[\u4e00-\u9fff\u3400-\u4dbf\uf900-\ufaff\u3040-\u309f\u30a0-\u30ff\uac00-\ud7af]"
)
_FENCED_LATEX_RE = re.compile(r"```latex\s*([\s\S]*?)\s*```")
_COMMENT_RE = re.compile(r"(^|[^\\])%.*$", re.MULTILINE)

MIN_CONTEXT_LENGTH = 500


def extract_latex_from_response(text: str) -> str:
    """Pull LaTeX out of a model reply, dropping markdown fences."""
    if not text:
        return ""

    match = _FENCED_LATEX_RE.search(text)
    if match and match.group(1):
        return match.group(1).strip()

    cleaned = text.strip()
    if cleaned.startswith("```latex"):
        cleaned = cleaned[len("```latex"):]
    elif cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def strip_latex_comments(text: str) -> str:
    """Remove ``%`` comments, keeping escaped ``\\%``."""
    return _COMMENT_RE.sub(r"\1", text).strip()


def extract_strategic_context(latex: str) -> Tuple[str, bool]:
    """Reduce a paper to abstract, introduction and conclusion.

    Returns:
        Tuple of (text, truncated). The full paper comes back untouched when
        the extracted sections are shorter than 500 characters.
    """
    combined = ""

    abstract = re.search(r"\\begin\{abstract\}([\s\S]*?)\\end\{abstract\}", latex, re.IGNORECASE)
    if abstract:
        combined += "\\section*{Abstract}\n" + abstract.group(1).strip() + "\n\n"

    intro = re.search(
        r"\\section\{(?:Introduction|Introdução|Introducción)\}([\s\S]*?)(?=\\section\{)",
        latex,
        re.IGNORECASE,
    )
    if intro:
        combined += "\\section{Introduction}\n" + intro.group(1).strip() + "\n\n"

    conclusion = re.search(
        r"\\section\{(?:Conclusion|Conclusão|Considerações Finais|Conclusión)\}"
        r"([\s\S]*?)(?=\\section\{|\\end\{document\})",
        latex,
        re.IGNORECASE,
    )
    if conclusion:
        combined += "\\section{Conclusion}\n" + conclusion.group(1).strip() + "\n\n"

    if len(combined) < MIN_CONTEXT_LENGTH:
        return latex, False
    return combined, True


def post_process_latex(latex: str) -> str:
    """Fix the usual compilation breakers in generated LaTeX."""
    code = latex

    code = re.sub(r"\\(?:new|renew)command\{\\keywords\}(?:\[.*?\])?\{.*?\}", "", code)
    code = re.sub(r"\\begin\{figure\*?\}([\s\S]*?)\\end\{figure\*?\}", "", code)
    code = re.sub(r"\\includegraphics\s*(\[.*?\])?\s*\{.*?\}", "", code)
    code = re.sub(r"\\captionof\s*\{figure\}\s*\{.*?\}", "", code)
    code = re.sub(r",?\s+&\s+", " and ", code)
    code = _CJK_RE.sub("", code)

    for env in LIST_ENVIRONMENTS:
        missing = code.count(f"\\begin{{{env}}}") - code.count(f"\\end{{{env}}}")
        if missing > 0:
            closing = f"\\end{{{env}}}" * missing
            doc_end = code.rfind("\\end{document}")
            if doc_end != -1:
                code = code[:doc_end] + f"\n{closing}\n" + code[doc_end:]
            else:
                code += f"\n{closing}"

    if "\\end{document}" not in code:
        code += "\n\\end{document}"

    doc_class = code.find("\\documentclass")
    if doc_class > 0:
        code = code[doc_class:]

    return code
