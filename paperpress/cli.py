#!/usr/bin/env python3
"""PaperPress CLI - generate, review, compile and publish papers from the command line.

Usage:
    paperpress keys list|add|remove [KEY]
    paperpress title <topic> [options]
    paperpress generate <title> -o paper.tex [options]
    paperpress analyze <paper.tex>
    paperpress improve <paper.tex> [-o improved.tex]
    paperpress compile <paper.tex> [-o paper.pdf]
    paperpress publish <paper.pdf> --title TITLE --author "Name|Affiliation|ORCID"
    paperpress --version

Commands:
    keys        Manage stored Gemini API keys (rotated on rate limits)
    title       Suggest a paper title for a topic
    generate    Write a complete LaTeX paper
    analyze     Score a paper against the review criteria
    improve     Rewrite a paper using its weakest criteria
    compile     Compile LaTeX to PDF
    publish     Publish a PDF to Zenodo
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from .exceptions import PaperPressError


def get_version():
    """Get package version."""
    try:
        from paperpress import __version__
        return __version__
    except ImportError:
        return "0.1.0"


def _build_press(args):
    from paperpress.config import Config
    from paperpress.paperpress import PaperPress

    config = Config.from_env()
    if getattr(args, "settings", None):
        config.settings_path = args.settings

    level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    return PaperPress(config=config, log_level=level)


def _read_text(path_str):
    path = Path(path_str)
    if not path.exists():
        print(f"Error: File not found: {path}")
        return None
    return path.read_text(encoding="utf-8")


def cmd_keys(args):
    """Manage stored API keys."""
    press = _build_press(args)

    if args.action == "list":
        keys = press.api_keys()
        if not keys:
            print("No API keys configured.")
            return 0
        for i, key in enumerate(keys):
            marker = "*" if i == press.pool.active_index else " "
            print(f" {marker} {i + 1}. {key}")
        return 0

    if not args.key:
        print(f"Error: 'keys {args.action}' needs a KEY argument")
        return 1

    if args.action == "add":
        added = press.add_api_key(args.key)
        print("Key added." if added else "Key already stored.")
        return 0

    removed = press.remove_api_key(args.key)
    print("Key removed." if removed else "Key not found.")
    return 0 if removed else 1


def cmd_title(args):
    """Suggest a paper title."""
    press = _build_press(args)
    title = press.generate_title(
        args.topic, language=args.language, model=args.model, discipline=args.discipline
    )
    print(title)
    return 0


def cmd_generate(args):
    """Write a LaTeX paper."""
    from paperpress.core.models import Author

    press = _build_press(args)
    authors = [Author.parse(a) for a in args.author or []]

    print(f"Generating paper: {args.title}")
    paper = press.generate_paper(
        args.title, language=args.language, model=args.model, authors=authors
    )

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(paper.latex, encoding="utf-8")

    print(f"  Output: {output_path} ({len(paper.latex)} chars)")
    if paper.sources:
        print("  Sources:")
        for source in paper.sources:
            print(f"    - {source.title or source.uri}: {source.uri}")
    return 0


def cmd_analyze(args):
    """Score a paper."""
    latex = _read_text(args.paper)
    if latex is None:
        return 1

    press = _build_press(args)
    result = press.analyze_paper(latex, model=args.model)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return 0

    for item in result.items:
        print(f"  Topic {item.topic_num:>2}: {item.score:>4.1f}  {item.improvement}")
    print(f"\nAverage score: {result.average_score:.2f}")
    return 0


def cmd_improve(args):
    """Improve a paper using its analysis."""
    latex = _read_text(args.paper)
    if latex is None:
        return 1

    press = _build_press(args)
    improved = press.improve_paper(latex, language=args.language)

    source = Path(args.paper)
    output_path = Path(args.output) if args.output else source.with_name(
        f"{source.stem}_improved{source.suffix}"
    )
    output_path.write_text(improved, encoding="utf-8")
    print(f"Improved paper: {output_path}")
    return 0


def cmd_compile(args):
    """Compile LaTeX to PDF."""
    latex = _read_text(args.paper)
    if latex is None:
        return 1

    press = _build_press(args)
    source = Path(args.paper)
    output_path = args.output or str(source.with_suffix(".pdf"))
    press.compile(latex, output_path)
    print(f"PDF: {output_path}")
    return 0


def cmd_publish(args):
    """Publish a PDF to Zenodo."""
    from paperpress.core.models import Author

    press = _build_press(args)
    if args.token:
        press.publisher.token = args.token

    authors = [Author.parse(a) for a in args.author]
    url = press.publish(args.pdf, args.title, authors, description=args.description)
    print(f"Published: {url}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(
        prog="paperpress",
        description="PaperPress - AI-assisted academic paper generation and publishing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  paperpress keys add AIza...
  paperpress title "protein folding" --discipline Biology
  paperpress generate "Deep Learning for Protein Folding" -o paper.tex --author "Doe, Jane|MIT"
  paperpress compile paper.tex -o paper.pdf
  paperpress publish paper.pdf --title "Deep Learning for Protein Folding" --author "Doe, Jane"
        """
    )
    parser.add_argument("--version", action="version", version=f"paperpress {get_version()}")
    parser.add_argument("--settings", help="Settings file holding stored API keys")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    keys_parser = subparsers.add_parser("keys", help="Manage stored Gemini API keys")
    keys_parser.add_argument("action", choices=["list", "add", "remove"])
    keys_parser.add_argument("key", nargs="?", help="API key (for add/remove)")

    title_parser = subparsers.add_parser("title", help="Suggest a paper title")
    title_parser.add_argument("topic", help="Research topic")
    title_parser.add_argument("--discipline", default="", help="Academic discipline")
    title_parser.add_argument("--language", choices=["en", "pt", "es", "fr"], help="Language")
    title_parser.add_argument("--model", default="flash", help="Model tier (pro/flash)")

    generate_parser = subparsers.add_parser("generate", help="Write a LaTeX paper")
    generate_parser.add_argument("title", help="Paper title")
    generate_parser.add_argument("-o", "--output", default="paper.tex", help="Output .tex path")
    generate_parser.add_argument("--language", choices=["en", "pt", "es", "fr"], help="Language")
    generate_parser.add_argument("--model", default="pro", help="Model tier (pro/flash)")
    generate_parser.add_argument("--author", action="append",
                                 help='Author as "Name|Affiliation|ORCID" (repeatable)')

    analyze_parser = subparsers.add_parser("analyze", help="Score a paper")
    analyze_parser.add_argument("paper", help="LaTeX file")
    analyze_parser.add_argument("--model", default="flash", help="Model tier (pro/flash)")
    analyze_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    improve_parser = subparsers.add_parser("improve", help="Improve a paper")
    improve_parser.add_argument("paper", help="LaTeX file")
    improve_parser.add_argument("-o", "--output", help="Output .tex path")
    improve_parser.add_argument("--language", choices=["en", "pt", "es", "fr"], help="Language")

    compile_parser = subparsers.add_parser("compile", help="Compile LaTeX to PDF")
    compile_parser.add_argument("paper", help="LaTeX file")
    compile_parser.add_argument("-o", "--output", help="Output PDF path")

    publish_parser = subparsers.add_parser("publish", help="Publish a PDF to Zenodo")
    publish_parser.add_argument("pdf", help="PDF file")
    publish_parser.add_argument("--title", required=True, help="Record title")
    publish_parser.add_argument("--author", action="append", required=True,
                                help='Author as "Name|Affiliation|ORCID" (repeatable)')
    publish_parser.add_argument("--description", help="Record description")
    publish_parser.add_argument("--token", help="Zenodo token (or set ZENODO_TOKEN)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    # Dispatch to command handler
    commands = {
        "keys": cmd_keys,
        "title": cmd_title,
        "generate": cmd_generate,
        "analyze": cmd_analyze,
        "improve": cmd_improve,
        "compile": cmd_compile,
        "publish": cmd_publish,
    }

    try:
        return commands[args.command](args)
    except (PaperPressError, FileNotFoundError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
