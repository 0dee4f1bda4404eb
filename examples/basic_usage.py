"""Basic usage example for PaperPress."""
from paperpress import PaperPress, Author

def main():
    # Initialize PaperPress (reads GEMINI_API_KEY / ZENODO_TOKEN from .env)
    print("Initializing PaperPress...")
    press = PaperPress()

    print(f"API keys in pool: {', '.join(press.api_keys()) or 'none'}")

    # Example 1: Title
    print("\n=== Example 1: Title ===")
    title = press.generate_title(
        topic="Machine Learning in Healthcare",
        discipline="Medicine",
        language="en",
    )
    print(f"Title: {title}")

    # Example 2: Paper
    print("\n=== Example 2: Paper ===")
    paper = press.generate_paper(
        title,
        authors=[Author("Doe, Jane", "Example University")],
    )
    print(f"Generated {len(paper.latex)} chars of LaTeX")
    for source in paper.sources:
        print(f"  - {source.title or source.uri}")

    # Example 3: Review and refinement
    print("\n=== Example 3: Review ===")
    analysis = press.analyze_paper(paper.latex)
    print(f"Average score: {analysis.average_score:.2f}")
    for item in analysis.weak_points():
        print(f"  Topic {item.topic_num}: {item.improvement}")

    improved = press.improve_paper(paper.latex, analysis)

    # Example 4: Compile
    print("\n=== Example 4: Compile ===")
    pdf_path = press.compile(improved, "./output/example_paper.pdf")
    print(f"PDF: {pdf_path}")

if __name__ == "__main__":
    main()
