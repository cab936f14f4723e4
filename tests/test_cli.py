from __future__ import annotations

import pytest
from click.testing import CliRunner

from release_kit import cli
from release_kit.errors import TagVerificationError, UserDeclined


@pytest.fixture(autouse=True)
def _clean_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:  # noqa: ANN001
    # 현재 디렉토리의 .env 가 읽히지 않도록 빈 디렉토리에서 실행한다.
    monkeypatch.chdir(tmp_path)
    for key in ("FUNCTION_NAME", "DEFAULT_REGION", "SKIP_TAGGING"):
        monkeypatch.delenv(key, raising=False)


def test_success_exits_zero(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_apply(cfg):  # noqa: ANN001, ANN202
        seen["cfg"] = cfg
        return "# Release summary"

    monkeypatch.setattr(cli, "apply_release", fake_apply)

    result = CliRunner().invoke(cli.main, ["us-east-1", "api", "--production"])

    assert result.exit_code == 0, result.output
    assert "Done." in result.output
    assert seen["cfg"].target.region == "us-east-1"
    assert seen["cfg"].target.function_name == "api"
    assert seen["cfg"].environment.label == "PROD"


def test_default_region(monkeypatch: pytest.MonkeyPatch) -> None:
    seen = {}

    def fake_apply(cfg):  # noqa: ANN001, ANN202
        seen["cfg"] = cfg
        return "ok"

    monkeypatch.setattr(cli, "apply_release", fake_apply)

    CliRunner().invoke(cli.main, [])

    assert seen["cfg"].target.region == "eu-central-1"
    assert seen["cfg"].environment.label == "dev"


def test_declined_prints_aborted_and_exits_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def declined(cfg):  # noqa: ANN001, ANN202, ARG001
        raise UserDeclined("Continue?")

    monkeypatch.setattr(cli, "apply_release", declined)

    result = CliRunner().invoke(cli.main, ["eu-central-1", "api"])

    assert result.exit_code == 1
    assert "Aborted." in result.output


def test_release_error_prints_error_and_exits_one(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(cfg):  # noqa: ANN001, ANN202, ARG001
        raise TagVerificationError("tag missing")

    monkeypatch.setattr(cli, "apply_release", failing)

    result = CliRunner().invoke(cli.main, ["eu-central-1", "api"])

    assert result.exit_code == 1
    assert "ERROR:" in result.output
    assert "tag missing" in result.output


def test_plan_does_not_release(monkeypatch: pytest.MonkeyPatch) -> None:
    def must_not_run(cfg):  # noqa: ANN001, ANN202, ARG001
        raise AssertionError("apply_release must not be called")

    monkeypatch.setattr(cli, "apply_release", must_not_run)

    result = CliRunner().invoke(cli.main, ["--plan", "--skip-tagging"])

    assert result.exit_code == 0, result.output
    assert "# Release plan" in result.output
    assert "- skip_tagging: True" in result.output


def test_help_lists_production_flag() -> None:
    result = CliRunner().invoke(cli.main, ["-h"])

    assert result.exit_code == 0
    assert "--production" in result.output
