"""Tests for gitscribe.cli module."""

import yaml
from typer.testing import CliRunner

from gitscribe import __version__
from gitscribe.cli import app
from gitscribe.commit_flow import CommitOutcome, CommitStatus
from gitscribe.git import NotInRepositoryError
from gitscribe.global_config import get_config_file_path, get_credential, load_stored_config
from gitscribe.llm import MissingAPIKeyError

runner = CliRunner()


class TestVersion:
    """Tests for the --version flag."""

    def test_version(self):
        """Test that --version prints the version and exits."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output


class TestMainCommand:
    """Tests for the default commit command."""

    def test_passes_flags(self, mocker, config_dir):
        """Test that the flags reach the orchestrator."""
        orchestrator_cls = mocker.patch("gitscribe.cli.main.CommitOrchestrator")
        orchestrator_cls.return_value.run.return_value = CommitOutcome(CommitStatus.COMMITTED, commit_id="abc")

        result = runner.invoke(app, ["-a", "-y", "-m", "gpt-4o", "-c", "why it changed"])

        assert result.exit_code == 0
        orchestrator_cls.return_value.run.assert_called_once_with(
            stage_all_first=True,
            auto_accept=True,
            model_override="gpt-4o",
            context="why it changed",
        )

    def test_defaults(self, mocker, config_dir):
        """Test the run arguments without flags."""
        orchestrator_cls = mocker.patch("gitscribe.cli.main.CommitOrchestrator")
        orchestrator_cls.return_value.run.return_value = CommitOutcome(CommitStatus.NOTHING_TO_COMMIT)

        result = runner.invoke(app, [])

        assert result.exit_code == 0
        orchestrator_cls.return_value.run.assert_called_once_with(
            stage_all_first=False,
            auto_accept=False,
            model_override=None,
            context=None,
        )

    def test_git_error_exits_1(self, mocker, config_dir):
        """Test that repository errors print an error and exit 1."""
        orchestrator_cls = mocker.patch("gitscribe.cli.main.CommitOrchestrator")
        orchestrator_cls.return_value.run.side_effect = NotInRepositoryError("Not in a git repository.")

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Error: Not in a git repository." in result.output

    def test_llm_error_exits_1(self, mocker, config_dir):
        """Test that provider errors print an error and exit 1."""
        orchestrator_cls = mocker.patch("gitscribe.cli.main.CommitOrchestrator")
        orchestrator_cls.return_value.run.side_effect = MissingAPIKeyError("OpenAI API key not found.")

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Error: OpenAI API key not found." in result.output

    def test_config_error_exits_1(self, mocker, config_dir):
        """Test that a broken configuration file exits 1."""
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("ai: [broken\n")
        orchestrator_cls = mocker.patch("gitscribe.cli.main.CommitOrchestrator")

        result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert "Error:" in result.output
        orchestrator_cls.assert_not_called()


class TestConfigCommands:
    """Tests for gitscribe config subcommands."""

    def test_show(self, config_dir):
        """Test showing the configuration with a masked key."""
        runner.invoke(app, ["config", "set-api-key", "sk-1234567890abcdef"])

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "Provider: openai" in result.output
        assert "sk-12345...cdef" in result.output
        assert "sk-1234567890abcdef" not in result.output

    def test_show_env_reference(self, config_dir):
        """Test that ${ENV} references are shown unresolved."""
        runner.invoke(app, ["config", "set-api-key", "${OPENAI_API_KEY}"])

        result = runner.invoke(app, ["config", "show"])

        assert "${OPENAI_API_KEY}" in result.output

    def test_set_provider(self, config_dir):
        """Test setting the provider."""
        result = runner.invoke(app, ["config", "set-provider", "groq"])

        assert result.exit_code == 0
        assert load_stored_config().ai.provider == "groq"

    def test_set_provider_clears_key_of_previous_provider(self, config_dir):
        """Test that a key set for one provider is not reused for another."""
        runner.invoke(app, ["config", "set-api-key", "sk-openai"])

        result = runner.invoke(app, ["config", "set-provider", "github"])

        assert result.exit_code == 0
        assert "API key cleared" in result.output
        assert load_stored_config().ai.api_key is None

    def test_set_unknown_provider(self, config_dir):
        """Test that an unknown provider exits 1."""
        result = runner.invoke(app, ["config", "set-provider", "skynet"])

        assert result.exit_code == 1
        assert "Unsupported provider: skynet" in result.output

    def test_set_temperature_out_of_range(self, config_dir):
        """Test that 2.5 is rejected and the file is unchanged."""
        load_stored_config()
        before = get_config_file_path().read_bytes()

        result = runner.invoke(app, ["config", "set-temperature", "2.5"])

        assert result.exit_code == 1
        assert "Invalid temperature" in result.output
        assert get_config_file_path().read_bytes() == before

    def test_set_values(self, config_dir):
        """Test the remaining setters."""
        for args in (
            ["set-model", "gpt-4o"],
            ["set-temperature", "0.5"],
            ["set-max-tokens", "400"],
            ["set-interactive", "false"],
            ["set-conventional", "false"],
            ["set-show-diff", "false"],
            ["set-editor", "code --wait"],
        ):
            result = runner.invoke(app, ["config", *args])
            assert result.exit_code == 0, result.output

        data = yaml.safe_load(get_config_file_path().read_text())
        assert data["ai"]["model"] == "gpt-4o"
        assert data["ai"]["temperature"] == 0.5
        assert data["ai"]["max_tokens"] == 400
        assert data["ui"] == {"interactive": False, "show_diff": False, "editor": "code --wait"}
        assert data["git"]["conventional_commits"] is False

    def test_set_max_tokens_invalid(self, config_dir):
        """Test that a non-positive token budget exits 1."""
        result = runner.invoke(app, ["config", "set-max-tokens", "0"])
        assert result.exit_code == 1

    def test_set_api_key_credentials(self, config_dir):
        """Test storing the key in the credentials file for the active provider."""
        runner.invoke(app, ["config", "set-provider", "anthropic"])

        result = runner.invoke(app, ["config", "set-api-key", "--credentials", "sk-ant-x"])

        assert result.exit_code == 0
        assert get_credential("ANTHROPIC_API_KEY") == "sk-ant-x"
        assert load_stored_config().ai.api_key is None

    def test_path(self, config_dir):
        """Test printing the config file path."""
        result = runner.invoke(app, ["config", "path"])

        assert result.exit_code == 0
        assert str(config_dir / "config.yaml") in result.output


class TestModelsCommand:
    """Tests for gitscribe models."""

    def test_marks_current_model(self, config_dir):
        """Test that the configured model is marked."""
        result = runner.invoke(app, ["models"])

        assert result.exit_code == 0
        assert "● gpt-4o-mini" in result.output
        assert "gpt-4o\n" in result.output

    def test_other_provider(self, config_dir):
        """Test listing another provider's catalog without a marker."""
        result = runner.invoke(app, ["models", "--provider", "anthropic"])

        assert result.exit_code == 0
        assert "claude-3-haiku-20240307" in result.output
        assert "●" not in result.output

    def test_unknown_provider(self, config_dir):
        """Test that an unknown provider exits 1."""
        result = runner.invoke(app, ["models", "-p", "nope"])
        assert result.exit_code == 1


class TestMaskSecret:
    """Tests for mask_secret helper."""

    def test_masks_long_keys(self):
        """Test that long keys keep only a prefix and suffix."""
        from gitscribe.cli.utils import mask_secret

        assert mask_secret("sk-1234567890abcdef") == "sk-12345...cdef"
        assert mask_secret("short") == "***"
        assert mask_secret(None) == "not set"
        assert mask_secret("${OPENAI_API_KEY}") == "${OPENAI_API_KEY}"
