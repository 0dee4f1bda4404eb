"""Service providers: LLM backends, LaTeX compilation and publishing."""
