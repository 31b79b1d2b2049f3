"""Tests for the command line interface.

Covers:
- The languages listing
- Dry-run and writing generation
- Error reporting through the exit code
"""

from __future__ import annotations

import json

import pytest

from kapeta_codegen import cli


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from attaching its own log handlers during tests."""
    monkeypatch.setattr(cli, "configure_logging", lambda **kwargs: None)


@pytest.fixture
def data_file(tmp_path, data):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(data))
    return path


@pytest.fixture
def base_dir(make_templates):
    return make_templates(
        {
            "kapeta/test/a.txt": "#FILENAME:{{ data.metadata.name }}.txt\n{{ type('user') }}",
            "kapeta/test/run.sh": "#FILENAME:run.sh::755\necho {{ options.greeting }}",
        }
    )


class TestCli:
    def test_languages(self, capsys):
        assert cli.main(["languages"]) == 0

        output = capsys.readouterr().out
        assert "python" in output
        assert "golang" in output

    def test_no_command(self):
        assert cli.main([]) == 1

    def test_dry_run(self, base_dir, data_file, tmp_path):
        out = tmp_path / "out"

        exit_code = cli.main(
            ["generate", str(base_dir), "--data", str(data_file), "--output", str(out), "--dry-run"]
        )

        assert exit_code == 0
        assert not out.exists()

    def test_generate_writes_files(self, base_dir, data_file, tmp_path):
        out = tmp_path / "out"
        config = tmp_path / "target.json"
        config.write_text(json.dumps({"options": {"greeting": "hello"}}))

        exit_code = cli.main(
            [
                "generate",
                str(base_dir),
                "--data",
                str(data_file),
                "--config",
                str(config),
                "--output",
                str(out),
            ]
        )

        assert exit_code == 0
        assert (out / "users.txt").read_text() == "User"
        assert (out / "run.sh").read_text() == "echo hello"

    def test_context_document(self, base_dir, data_file, tmp_path):
        context = tmp_path / "context.yml"
        context.write_text("spec:\n  consumers: []\n")

        exit_code = cli.main(
            ["generate", str(base_dir), "--data", str(data_file), "--context", str(context)]
        )

        assert exit_code == 0

    def test_missing_template_kind(self, tmp_path, make_templates):
        base_dir = make_templates({"kapeta/other/a.txt": "A"})
        data_file = tmp_path / "data.json"
        data_file.write_text(json.dumps({"kind": "kapeta/test"}))

        assert cli.main(["generate", str(base_dir), "--data", str(data_file)]) == 1

    def test_missing_base_dir(self, data_file):
        assert cli.main(["generate", "--data", str(data_file)]) == 1

    def test_missing_data_file(self, base_dir, tmp_path):
        assert cli.main(["generate", str(base_dir), "--data", str(tmp_path / "nope.json")]) == 1
