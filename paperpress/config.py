"""Configuration management for PaperPress."""
import os
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv


DEFAULT_SETTINGS_PATH = os.path.join("~", ".paperpress", "settings.json")


@dataclass
class Config:
    """PaperPress configuration.

    Attributes:
        gemini_api_key: Process-level default Gemini API key, used only when
            the settings store holds no keys
        settings_path: JSON file holding the stored API keys
        gemini_model_pro: Concrete model behind the "pro" tier
        gemini_model_flash: Concrete model behind the "flash" tier
        gemini_model_fallback: Cheaper model tried when the flash tier is out of quota
        max_retries: Attempts per API key for one request
        rotation_cooldown: Seconds to wait after switching to the next key
        compiler_url: LaTeX compilation endpoint
        compiler_timeout: Timeout in seconds for compilation requests
        zenodo_api_url: Zenodo depositions endpoint
        zenodo_token: Zenodo personal access token
        default_language: Default language code for generated papers
    """

    # LLM Settings
    gemini_api_key: Optional[str] = None
    settings_path: Optional[str] = DEFAULT_SETTINGS_PATH

    # Gemini Model Configuration
    gemini_model_pro: str = "gemini-3-pro-preview"
    gemini_model_flash: str = "gemini-3-flash-preview"
    gemini_model_fallback: str = "gemini-2.5-flash"

    # Retry Settings
    max_retries: int = 5
    rotation_cooldown: float = 10.0

    # Compilation
    compiler_url: str = "https://texlive.net/cgi-bin/latexcgi"
    compiler_timeout: int = 120

    # Publishing
    zenodo_api_url: str = "https://zenodo.org/api/deposit/depositions"
    zenodo_token: Optional[str] = None

    # Generation Settings
    default_language: str = "en"

    # Storage

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Config":
        """Load configuration from environment variables.

        Args:
            env_file: Path to .env file (optional)

        Returns:
            Config instance with values from environment
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            settings_path=os.getenv("PAPERPRESS_SETTINGS_PATH", DEFAULT_SETTINGS_PATH),
            gemini_model_pro=os.getenv("GEMINI_MODEL_PRO", "gemini-3-pro-preview"),
            gemini_model_flash=os.getenv("GEMINI_MODEL_FLASH", "gemini-3-flash-preview"),
            gemini_model_fallback=os.getenv("GEMINI_MODEL_FALLBACK", "gemini-2.5-flash"),
            max_retries=int(os.getenv("PAPERPRESS_MAX_RETRIES", "5")),
            rotation_cooldown=float(os.getenv("PAPERPRESS_ROTATION_COOLDOWN", "10")),
            compiler_url=os.getenv(
                "PAPERPRESS_COMPILER_URL", "https://texlive.net/cgi-bin/latexcgi"
            ),
            compiler_timeout=int(os.getenv("PAPERPRESS_COMPILER_TIMEOUT", "120")),
            zenodo_api_url=os.getenv(
                "ZENODO_API_URL", "https://zenodo.org/api/deposit/depositions"
            ),
            zenodo_token=os.getenv("ZENODO_TOKEN"),
            default_language=os.getenv("PAPERPRESS_DEFAULT_LANGUAGE", "en"),
        )

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Config":
        """Load configuration from dictionary.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            Config instance
        """
        return cls(**{k: v for k, v in config_dict.items() if k in cls.__annotations__})
