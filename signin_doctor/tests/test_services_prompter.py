"""
Tests for interactive input collection.
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from rich.console import Console

from signin_doctor.models.schemas import ProductionKeystoreInput, RunConfiguration
from signin_doctor.services.prompter import Prompter


@pytest.fixture
def prompter():
    return Prompter(Console(record=True, width=120))


def answers(confirms, prompts):
    """Patch rich prompts to return the given answers in order."""
    return (
        patch("signin_doctor.services.prompter.Confirm.ask", side_effect=confirms),
        patch("signin_doctor.services.prompter.Prompt.ask", side_effect=prompts),
    )


class TestPrompter:
    """Tests for Prompter.collect()."""

    def test_full_interactive_run(self, prompter):
        confirm, prompt = answers(
            [True, True],
            ["~/keys/release.jks", "upload", "storepw", "", "com.example.app"],
        )
        with confirm, prompt:
            configuration = prompter.collect(RunConfiguration(), device_count=1)

        production = configuration.production
        assert production.path == Path.home() / "keys" / "release.jks"
        assert production.alias == "upload"
        assert production.store_password == "storepw"
        assert production.effective_key_password == "storepw"
        assert configuration.package_name == "com.example.app"

    def test_declines_everything(self, prompter):
        confirm, prompt = answers([False, False], [])
        with confirm, prompt:
            configuration = prompter.collect(RunConfiguration(), device_count=1)

        assert configuration == RunConfiguration()

    def test_no_device_skips_package_question(self, prompter):
        confirm, prompt = answers([False], [])
        with confirm as confirm_mock, prompt:
            configuration = prompter.collect(RunConfiguration(), device_count=0)

        assert configuration.package_name is None
        assert confirm_mock.call_count == 1
        assert "No device connected" in prompter.console.export_text()

    def test_blank_keystore_path(self, prompter):
        confirm, prompt = answers([True], [""])
        with confirm, prompt:
            configuration = prompter.collect(RunConfiguration(), device_count=0)

        assert configuration.production is None

    def test_command_line_values_not_asked_again(self, prompter):
        defaults = RunConfiguration(
            production=ProductionKeystoreInput(path=Path("release.jks"), store_password="pw"),
            package_name="com.example.app",
        )
        confirm, prompt = answers([], [])
        with confirm as confirm_mock, prompt as prompt_mock:
            configuration = prompter.collect(defaults, device_count=1)

        assert configuration == defaults
        confirm_mock.assert_not_called()
        prompt_mock.assert_not_called()

    def test_missing_password_is_asked(self, prompter):
        defaults = RunConfiguration(
            production=ProductionKeystoreInput(path=Path("release.jks")),
            package_name="com.example.app",
        )
        confirm, prompt = answers([], ["storepw", "keypw"])
        with confirm, prompt:
            configuration = prompter.collect(defaults, device_count=1)

        assert configuration.production.store_password == "storepw"
        assert configuration.production.effective_key_password == "keypw"
