"""Unit tests for main.py module."""

import pytest
from pytest_mock import MockerFixture, MockType

import main
from cityinfo.core.config import Settings


@pytest.mark.unit
class TestMainFunction:
    @pytest.mark.parametrize(
        ("env_port", "expected_port"),
        [
            ("8080", 8080),
            (None, 3000),
        ],
    )
    def test_port_precedence(
        self,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
        mock_uvicorn: MockType,
        mock_settings: Settings,
        env_port: str | None,
        expected_port: int,
    ) -> None:
        """PORT overrides the configured API port."""
        if env_port is not None:
            monkeypatch.setenv("PORT", env_port)
        else:
            monkeypatch.delenv("PORT", raising=False)
        mocker.patch("main.get_settings", return_value=mock_settings)
        mocker.patch("main.setup_logging")

        main.main()

        mock_uvicorn.assert_called_once()
        assert mock_uvicorn.call_args.kwargs["port"] == expected_port

    def test_debug_runs_import_string_with_reload(
        self,
        mocker: MockerFixture,
        monkeypatch: pytest.MonkeyPatch,
        mock_uvicorn: MockType,
    ) -> None:
        monkeypatch.setenv("DEBUG", "true")
        mocker.patch("main.setup_logging")

        main.main()

        args, kwargs = mock_uvicorn.call_args
        assert args[0] == "cityinfo.api.main:app"
        assert kwargs["reload"] is True

    def test_uvicorn_logs_are_intercepted(
        self, mocker: MockerFixture, mock_uvicorn: MockType
    ) -> None:
        mocker.patch("main.setup_logging")

        main.main()

        log_config = mock_uvicorn.call_args.kwargs["log_config"]
        assert log_config["handlers"]["default"]["class"] == (
            "cityinfo.core.logging.InterceptHandler"
        )
        assert set(log_config["loggers"]) == {
            "uvicorn",
            "uvicorn.error",
            "uvicorn.access",
        }
