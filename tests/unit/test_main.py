"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from src.main import create_application


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_dynamodb_handle")
    @patch("src.main.create_menu_service")
    @patch("src.main.create_migration_runner")
    @patch("src.main.create_app")
    @patch.dict(
        os.environ,
        {"LOG_LEVEL": "DEBUG", "ADMIN_API_KEY": "test-admin-key-1,test-admin-key-2"},
        clear=True,
    )
    def test_creates_application_with_all_dependencies(
        self,
        mock_create_app: Mock,
        mock_create_runner: Mock,
        mock_create_menu_service: Mock,
        mock_create_handle: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that application is created with all dependencies properly wired."""
        mock_handle = MagicMock()
        mock_resource = MagicMock()
        mock_handle.connect.return_value = mock_resource
        mock_create_handle.return_value = mock_handle

        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        app = create_application()

        assert app is mock_app
        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_handle.connect.assert_called_once()
        mock_handle.warmup.assert_called_once()
        mock_create_menu_service.assert_called_once_with(mock_resource)
        mock_create_runner.assert_called_once_with(mock_resource)
        mock_create_app.assert_called_once_with(
            menu_service=mock_create_menu_service.return_value,
            migration_runner=mock_create_runner.return_value,
            database=mock_handle,
            api_keys=["test-admin-key-1", "test-admin-key-2"],
        )
        mock_setup_observability.assert_called_once_with(mock_app)

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.create_dynamodb_handle")
    @patch("src.main.create_menu_service")
    @patch("src.main.create_migration_runner")
    @patch("src.main.create_app")
    @patch.dict(os.environ, {}, clear=True)
    def test_uses_development_key_when_none_configured(
        self,
        mock_create_app: Mock,
        mock_create_runner: Mock,
        mock_create_menu_service: Mock,
        mock_create_handle: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that a development key is used when ADMIN_API_KEY is unset."""
        create_application()

        assert mock_create_app.call_args.kwargs["api_keys"] == ["dummy-key-for-development"]
        mock_configure_logging.assert_called_once_with("INFO")
