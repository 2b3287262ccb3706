"""Unit tests for the command-line interface."""

from pathlib import Path

import pytest

from headline_bot.cli import _apply_overrides, _build_parser, main
from headline_bot.config import Settings


def test_flags_override_settings() -> None:
    parsed = _build_parser().parse_args(
        [
            "--dump-service-url",
            "http://dump:1",
            "--key",
            "news.key",
            "--key",
            "/keys/sport.key",
            "--use-legacy-lookup-service",
        ]
    )

    settings = _apply_overrides(Settings(lookup_service_url="http://lookup:2"), parsed)

    assert settings.dump_service_url == "http://dump:1"
    assert settings.lookup_service_url == "http://lookup:2"
    assert settings.key_files == [Path("news.key"), Path("/keys/sport.key")]
    assert settings.use_legacy_lookup_service is True


def test_absent_flags_keep_settings() -> None:
    parsed = _build_parser().parse_args([])

    settings = _apply_overrides(Settings(use_legacy_lookup_service=True), parsed)

    assert settings.use_legacy_lookup_service is True
    assert settings.key_files == []


def test_main_without_keys_fails() -> None:
    assert main(["--log-level", "error"]) == 1


def test_main_with_malformed_key_name_fails(tmp_path) -> None:
    key_file = tmp_path / "news"
    key_file.write_text("irrelevant")

    assert main(["--key", str(key_file), "--log-level", "ERROR"]) == 1


def test_log_level_flag_is_case_insensitive() -> None:
    parsed = _build_parser().parse_args(["--log-level", "warning"])

    assert _apply_overrides(Settings(), parsed).log_level == "WARNING"


def test_unknown_log_level_flag_is_rejected() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--log-level", "loud"])

    assert exc_info.value.code == 2
