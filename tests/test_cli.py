"""Tests for CLI entry point.

Tests the command-line interface and argument parsing.
"""

from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from canvas_upload.cli import CompositeReporter, create_reporters, main, parse_args
from canvas_upload.errors import AuthFailure
from canvas_upload.reporters import ConsoleReporter, JsonReporter

from tests.fakes import FakeCanvasHost


class TestParseArgs:
    """Tests for argument parsing."""

    def test_default_args(self):
        """Should have sensible defaults."""
        args = parse_args(["assets"])

        assert args.paths == ["assets"]
        assert args.user is None
        assert args.password is None
        assert args.canvas is None
        assert args.dev is False
        assert args.host is None
        assert args.dry_run is False
        assert args.config is None
        assert args.quiet is False
        assert args.json_output is None
        assert args.verbose is False

    def test_paths_required(self):
        with pytest.raises(SystemExit):
            parse_args([])

    def test_space_delimited_path_spec_kept_whole(self):
        """The path spec string is split later, by the collector."""
        args = parse_args(["assets/ favicon.ico"])
        assert args.paths == ["assets/ favicon.ico"]

    def test_all_flags(self):
        args = parse_args([
            "--user", "alice",
            "--password", "secret",
            "--canvas", "demo",
            "--dev",
            "--dry-run",
            "-c", "custom.json",
            "-q",
            "-j", "out.json",
            "-v",
            "assets",
        ])

        assert args.user == "alice"
        assert args.password == "secret"
        assert args.canvas == "demo"
        assert args.dev is True
        assert args.dry_run is True
        assert args.config == "custom.json"
        assert args.quiet is True
        assert args.json_output == "out.json"
        assert args.verbose is True

    def test_dev_and_host_are_exclusive(self):
        with pytest.raises(SystemExit):
            parse_args(["--dev", "--host", "https://example.com", "assets"])


class TestCreateReporters:
    """Tests for reporter creation based on args."""

    def test_console_reporter_by_default(self):
        reporters = create_reporters(parse_args(["assets"]))

        assert len(reporters) == 1
        assert isinstance(reporters[0], ConsoleReporter)

    def test_console_reporter_flags(self):
        reporters = create_reporters(parse_args(["-q", "--show-secrets", "assets"]))

        assert reporters[0].quiet is True
        assert reporters[0].show_secrets is True

    def test_json_reporter_when_requested(self):
        reporters = create_reporters(parse_args(["-j", "out.json", "assets"]))

        json_reporter = next(r for r in reporters if isinstance(r, JsonReporter))
        assert json_reporter.output_path == "out.json"


class TestCompositeReporter:
    def test_delegates_to_all(self):
        first, second = Mock(), Mock()
        composite = CompositeReporter([first, second])

        composite.on_duplicate_names(["a"])
        composite.on_run_complete("result")

        first.on_duplicate_names.assert_called_once_with(["a"])
        second.on_run_complete.assert_called_once_with("result")


class TestMain:
    """Tests for the main entry point and its exit codes."""

    def test_missing_argument_exits_2(self, clean_env, capsys):
        exit_code = main(["--password", "secret", "--canvas", "demo", "assets"])

        assert exit_code == 2
        assert "error[missing_argument]: Missing argument: user" in capsys.readouterr().err

    def test_bad_config_exits_2(self, clean_env, capsys):
        exit_code = main(["-c", str(clean_env / "missing.json"), "assets"])

        assert exit_code == 2
        assert "error[config_error]" in capsys.readouterr().err

    def test_no_files_exits_1(self, clean_env, capsys):
        """Collection fails before any network call."""
        exit_code = main([
            "--user", "alice", "--password", "secret", "--canvas", "demo",
            str(clean_env / "nothing-here"),
        ])

        assert exit_code == 1
        assert "error[no_files_found]" in capsys.readouterr().err

    def test_pipeline_error_exits_1(self, clean_env, capsys):
        with patch("canvas_upload.cli.UploadRunner") as mock_runner:
            mock_runner.return_value.run.side_effect = AuthFailure(401)
            exit_code = main(["--user", "alice", "--password", "x", "--canvas", "demo", "a"])

        assert exit_code == 1
        assert "error[auth_failure]: Failure to auth: 401" in capsys.readouterr().err

    def test_success_exits_0(self, clean_env):
        with patch("canvas_upload.cli.UploadRunner") as mock_runner:
            exit_code = main([
                "--user", "alice", "--password", "secret", "--canvas", "demo",
                "--dev", "--dry-run", "a b", "c",
            ])

        assert exit_code == 0
        host, creds = mock_runner.call_args.args
        assert host.base_url == "http://darklang.localhost:8000"
        assert creds.username == "alice"
        mock_runner.return_value.run.assert_called_once_with(["a b", "c"], dry_run=True)

    def test_composite_reporter_with_json(self, clean_env):
        with patch("canvas_upload.cli.UploadRunner") as mock_runner:
            main([
                "--user", "alice", "--password", "secret", "--canvas", "demo",
                "-j", str(clean_env / "out.json"), "a",
            ])

        assert isinstance(mock_runner.call_args.kwargs["reporter"], CompositeReporter)

    def test_unreadable_config_exits_2(self, clean_env, capsys):
        """A config path naming a directory is a configuration error."""
        (clean_env / "conf.d").mkdir()

        exit_code = main(["-c", str(clean_env / "conf.d"), "assets"])

        assert exit_code == 2
        assert "error[config_error]: Cannot read config file" in capsys.readouterr().err

    def test_unwritable_json_summary_exits_1(self, clean_env, capsys):
        """The summary write failure is reported after the upload ran."""
        (clean_env / "assets").mkdir()
        (clean_env / "assets" / "logo.png").write_bytes(b"\x01" * 16)
        (clean_env / "summary").mkdir()
        fake = FakeCanvasHost()

        with patch("canvas_upload.runner.build_auth_client", return_value=fake.client()), \
                patch("canvas_upload.runner.build_upload_client", return_value=fake.client()):
            exit_code = main([
                "--user", "alice", "--password", "secret", "--canvas", "demo",
                "-j", str(clean_env / "summary"), str(clean_env / "assets"),
            ])

        assert exit_code == 1
        assert len(fake.upload_requests) == 1
        assert "error[file_access_failure]" in capsys.readouterr().err
