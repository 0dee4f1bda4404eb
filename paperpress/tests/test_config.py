"""Tests for configuration loading."""

from paperpress.config import Config, DEFAULT_SETTINGS_PATH


class TestConfig:
    def test_defaults(self):
        config = Config()
        assert config.gemini_model_pro == "gemini-3-pro-preview"
        assert config.gemini_model_flash == "gemini-3-flash-preview"
        assert config.max_retries == 5
        assert config.rotation_cooldown == 10.0
        assert config.settings_path == DEFAULT_SETTINGS_PATH

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        monkeypatch.setenv("GEMINI_MODEL_FALLBACK", "cheap-model")
        monkeypatch.setenv("PAPERPRESS_MAX_RETRIES", "3")
        monkeypatch.setenv("PAPERPRESS_ROTATION_COOLDOWN", "2.5")
        monkeypatch.setenv("PAPERPRESS_SETTINGS_PATH", str(tmp_path / "s.json"))

        config = Config.from_env()

        assert config.gemini_api_key == "env-key"
        assert config.gemini_model_fallback == "cheap-model"
        assert config.max_retries == 3
        assert config.rotation_cooldown == 2.5
        assert config.settings_path == str(tmp_path / "s.json")

    def test_legacy_api_key_variable(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("API_KEY", "legacy-env")
        assert Config.from_env().gemini_api_key == "legacy-env"

    def test_env_file(self, monkeypatch, tmp_path):
        # Register ZENODO_TOKEN with monkeypatch so the value loaded from the file is undone.
        monkeypatch.setenv("ZENODO_TOKEN", "placeholder")
        monkeypatch.delenv("ZENODO_TOKEN")
        env_file = tmp_path / "custom.env"
        env_file.write_text("ZENODO_TOKEN=from-file\n")
        assert Config.from_env(str(env_file)).zenodo_token == "from-file"

    def test_from_dict_ignores_unknown(self):
        config = Config.from_dict({"max_retries": 2, "bogus": True})
        assert config.max_retries == 2
        assert not hasattr(config, "bogus")
