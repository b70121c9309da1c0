"""
Unit tests for the command-line entry point.
"""

import pytest
import requests
from unittest.mock import patch

from mcp4git.main import check_configuration, main, setup_argument_parser


class TestArgumentParser:
    """Test argument parsing."""

    def test_serve_options(self):
        args = setup_argument_parser().parse_args(["serve", "--host", "0.0.0.0", "--port", "8080"])

        assert args.command == "serve"
        assert args.host == "0.0.0.0"
        assert args.port == 8080

    def test_chat_options(self):
        args = setup_argument_parser().parse_args(
            ["--log-level", "DEBUG", "chat", "--server-url", "http://mcp:3001", "--model", "gemini-x"]
        )

        assert args.command == "chat"
        assert args.log_level == "DEBUG"
        assert args.server_url == "http://mcp:3001"
        assert args.model == "gemini-x"


class TestMain:
    """Test command dispatch."""

    @patch("mcp4git.server.run_server")
    def test_serve(self, mock_run_server):
        main(["serve", "--port", "9000"])

        mock_run_server.assert_called_once_with(host=None, port=9000)

    @patch("mcp4git.chat.run_chat")
    def test_chat(self, mock_run_chat):
        main(["chat", "--model", "gemini-x"])

        mock_run_chat.assert_called_once_with(server_url=None, model="gemini-x")

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 2
        assert "serve" in capsys.readouterr().out

    @patch("mcp4git.main.check_configuration", return_value=True)
    def test_config_test(self, mock_check):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config-test"])

        assert exc_info.value.code == 0

    @patch("mcp4git.server.run_server", side_effect=OSError("address already in use"))
    def test_startup_error_exits_nonzero(self, mock_run_server):
        with pytest.raises(SystemExit) as exc_info:
            main(["serve"])

        assert exc_info.value.code == 1


class TestCheckConfiguration:
    """Test the configuration check."""

    @patch("mcp4git.main.github_api")
    def test_success(self, mock_api):
        mock_api.get_json.return_value = {"login": "test_user"}

        assert check_configuration() is True
        mock_api.get_json.assert_called_once_with("/user")

    @patch("mcp4git.main.github_api")
    def test_github_unreachable(self, mock_api):
        mock_api.get_json.side_effect = requests.exceptions.ConnectionError("down")

        assert check_configuration() is False


if __name__ == "__main__":
    pytest.main([__file__])
