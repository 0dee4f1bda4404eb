"""Setup configuration for PaperPress."""
from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="paperpress",
    version="0.1.0",
    description="AI-assisted academic paper generation, compilation and publishing with multi-key Gemini rotation",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Education",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Text Processing :: Markup :: LaTeX",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.9",
    install_requires=[
        # Core dependencies
        "python-dotenv>=1.0.0",
        "requests>=2.31.0",
        # LLM provider
        "google-generativeai>=0.8.0",
        # Compiler log cleanup
        "beautifulsoup4>=4.11.0",
    ],
    extras_require={
        "dev": [
            # Development dependencies
            "pytest>=7.0.0",
            "black>=22.0.0",
            "mypy>=0.990",
            "flake8>=5.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "paperpress=paperpress.cli:main",
        ],
    },
)
