"""Tests for AssistConfig loading and precedence."""

import pytest

from yammii_assist.config.settings import AssistConfig

_ENV_VARS = [
    "GOOGLE_API_KEY",
    "GEMINI_API_KEY",
    "YAMMII_LLM_MODEL",
    "YAMMII_CHAT_TEMPERATURE",
    "YAMMII_EXTRACTION_TEMPERATURE",
    "YAMMII_KNOWLEDGE_BASE_PATH",
    "YAMMII_PROMPT_TEMPLATE_PATH",
    "YAMMII_COST_DEBUG_WARN_THRESHOLD_USD",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the developer's environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self):
        config = AssistConfig()
        assert config.llm_provider == "google"
        assert config.llm_model == "gemini-2.5-flash"
        assert config.chat_temperature == 0.2
        assert config.extraction_temperature == 0.1
        assert config.google_api_key is None
        assert config.knowledge_base_path is None
        assert config.prompt_template_path is None
        assert config.greeting.startswith("你好！")


class TestEnvironment:
    def test_env_values(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "g-key")
        monkeypatch.setenv("YAMMII_LLM_MODEL", "gemini-2.5-pro")
        monkeypatch.setenv("YAMMII_CHAT_TEMPERATURE", "0.0")
        monkeypatch.setenv("YAMMII_EXTRACTION_TEMPERATURE", "0.05")
        monkeypatch.setenv("YAMMII_KNOWLEDGE_BASE_PATH", "/tmp/kb.md")
        monkeypatch.setenv("YAMMII_COST_DEBUG_WARN_THRESHOLD_USD", "0.01")

        config = AssistConfig()

        assert config.google_api_key == "g-key"
        assert config.llm_model == "gemini-2.5-pro"
        assert config.chat_temperature == 0.0
        assert config.extraction_temperature == 0.05
        assert config.knowledge_base_path == "/tmp/kb.md"
        assert config.cost_debug_warn_threshold_usd == 0.01

    def test_gemini_api_key_fallback(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        assert AssistConfig().google_api_key == "gemini-key"

    def test_google_api_key_preferred(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert AssistConfig().google_api_key == "google-key"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("YAMMII_LLM_MODEL", "gemini-2.5-flash-lite")
        assert AssistConfig.from_env().llm_model == "gemini-2.5-flash-lite"

    def test_kwargs_override_env(self, monkeypatch):
        monkeypatch.setenv("YAMMII_LLM_MODEL", "gemini-2.5-pro")
        config = AssistConfig(llm_model="gemini-2.5-flash-lite")
        assert config.llm_model == "gemini-2.5-flash-lite"


class TestValidation:
    def test_unknown_option(self):
        with pytest.raises(ValueError, match="Unknown configuration option"):
            AssistConfig(not_a_setting=1)

    def test_unsupported_provider(self):
        with pytest.raises(ValueError, match="Unsupported LLM provider"):
            AssistConfig(llm_provider="openai")

    def test_with_overrides_copies(self):
        config = AssistConfig(chat_temperature=0.3)
        other = config.with_overrides(llm_model="gemini-2.5-pro")
        assert other.llm_model == "gemini-2.5-pro"
        assert other.chat_temperature == 0.3
        assert config.llm_model == "gemini-2.5-flash"

    def test_with_overrides_unknown_option(self):
        with pytest.raises(ValueError):
            AssistConfig().with_overrides(bogus=True)


class TestConfigFile:
    def test_from_file(self, tmp_path):
        path = tmp_path / "yammii.toml"
        path.write_text(
            "\n".join([
                "[llm]",
                'model = "gemini-2.5-pro"',
                "chat_temperature = 0.0",
                "",
                "[knowledge]",
                'base_path = "./kb/pos.md"',
                'prompt_template_path = "./kb/prompt.md"',
                'greeting = "欢迎！"',
                "",
                "[api_keys]",
                'google = "file-key"',
                "",
                "[cost_telemetry]",
                "warn_threshold_usd = 0.5",
            ]),
            encoding="utf-8",
        )

        config = AssistConfig.from_file(path)

        assert config.llm_model == "gemini-2.5-pro"
        assert config.chat_temperature == 0.0
        assert config.knowledge_base_path == "./kb/pos.md"
        assert config.prompt_template_path == "./kb/prompt.md"
        assert config.greeting == "欢迎！"
        assert config.google_api_key == "file-key"
        assert config.cost_debug_warn_threshold_usd == 0.5

    def test_from_file_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AssistConfig.from_file(tmp_path / "missing.toml")

    def test_to_file_round_trip_without_api_key(self, tmp_path):
        config = AssistConfig(
            llm_model="gemini-2.5-pro",
            extraction_temperature=0.05,
            knowledge_base_path="./kb.md",
            google_api_key="secret",
            greeting='说 "你好"',
        )
        path = tmp_path / "out" / "config.toml"

        config.to_file(path)

        assert "secret" not in path.read_text(encoding="utf-8")
        loaded = AssistConfig.from_file(path)
        assert loaded.llm_model == "gemini-2.5-pro"
        assert loaded.extraction_temperature == 0.05
        assert loaded.knowledge_base_path == "./kb.md"
        assert loaded.greeting == '说 "你好"'
        assert loaded.google_api_key is None

    @pytest.mark.parametrize(
        "greeting",
        [
            "你好！\n有什么可以帮您？",
            "第一行\r\n第二行\t制表",
            "路径 C:\\pos\\kb.md",
            "bell\x07 and del\x7f",
        ],
    )
    def test_to_file_round_trip_control_characters(self, tmp_path, greeting):
        path = tmp_path / "config.toml"

        AssistConfig(greeting=greeting).to_file(path)

        assert AssistConfig.from_file(path).greeting == greeting
