"""End-to-end tests for the bundle-resolver CLI."""

import csv
import json
import logging
import textwrap

import pytest

from args import parse_args
from bundleresolver import main, output_format, run
from constants import Constants, ExitCodes

WORKSPACE = textwrap.dedent("""
    repositories:
      - name: local
        bundles:
          - name: api
            version: 1.0.0
            synchronized: false
            exports: [{package: com.acme.api, version: "1.0"}]
          - name: broken
            version: 1.0.0
            synchronized: false
            sync_error: disk full
            exports: [com.acme.broken]
    project:
      name: demo
      imports: [{package: com.acme.api}]
""")


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(Constants.ENV_CONFIG, raising=False)
    monkeypatch.setenv(Constants.ENV_LOG_LEVEL, "INFO")


def workspace(tmp_path, text=WORKSPACE):
    path = tmp_path / "workspace.yml"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_success_prints_summary(tmp_path, capsys):
    code = run(parse_args(["-w", workspace(tmp_path)]))

    assert code == ExitCodes.SUCCESS.value
    out = capsys.readouterr().out
    assert out == "package-import com.acme.api -> api 1.0.0\n"


def test_quiet_suppresses_summary(tmp_path, capsys):
    assert run(parse_args(["-w", workspace(tmp_path), "-q"])) == ExitCodes.SUCCESS.value
    assert capsys.readouterr().out == ""


def test_missing_workspace_is_file_error(tmp_path):
    code = run(parse_args(["-w", str(tmp_path / "missing.yml")]))
    assert code == ExitCodes.FILE_ERROR.value


def test_unresolvable_requirement(tmp_path, caplog):
    text = WORKSPACE.replace("com.acme.api}]", "com.acme.missing}]")
    code = run(parse_args(["-w", workspace(tmp_path, text), "-q"]))

    assert code == ExitCodes.RESOLUTION_FAILED.value
    assert "com.acme.missing" in caplog.text


def test_ignore_errors_flag(tmp_path):
    text = WORKSPACE.replace("com.acme.api}]", "com.acme.missing}]")
    code = run(parse_args(["-w", workspace(tmp_path, text), "-q", "--ignore-errors"]))
    assert code == ExitCodes.SUCCESS.value


def test_local_only_hides_unsynchronized_bundles(tmp_path):
    code = run(parse_args(["-w", workspace(tmp_path), "-q", "--local-only"]))
    assert code == ExitCodes.RESOLUTION_FAILED.value


def test_config_file_section_applies(tmp_path):
    config = tmp_path / "bundle-resolver.yml"
    config.write_text("resolution:\n  local_only: true\n", encoding="utf-8")

    code = run(parse_args(["-w", workspace(tmp_path), "-q"]))
    assert code == ExitCodes.RESOLUTION_FAILED.value


def test_sync_success(tmp_path):
    code = run(parse_args(["-w", workspace(tmp_path), "-q", "--sync"]))
    assert code == ExitCodes.SUCCESS.value


def test_sync_incomplete(tmp_path):
    text = WORKSPACE.replace("com.acme.api}]", "com.acme.broken}]")
    code = run(parse_args(["-w", workspace(tmp_path, text), "-q", "--sync"]))
    assert code == ExitCodes.SYNC_INCOMPLETE.value


def test_json_export(tmp_path):
    out = tmp_path / "result.json"
    code = run(parse_args(["-w", workspace(tmp_path), "-q", "-o", str(out)]))

    assert code == ExitCodes.SUCCESS.value
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["success"] is True
    assert data["resolved"][0]["provider"] == "api"
    assert data["resolved"][0]["synchronized"] is False


def test_csv_export_inferred_from_extension(tmp_path):
    out = tmp_path / "result.csv"
    code = run(parse_args(["-w", workspace(tmp_path), "-q", "-o", str(out)]))

    assert code == ExitCodes.SUCCESS.value
    with open(out, newline="", encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert rows == [{
        "kind": "package-import",
        "requirement": "com.acme.api",
        "version_range": "*",
        "optional": "False",
        "provider": "api",
        "provider_version": "1.0.0",
        "synchronized": "False",
    }]


def test_unwritable_output_is_file_error(tmp_path):
    out = tmp_path / "no-such-dir" / "result.json"
    code = run(parse_args(["-w", workspace(tmp_path), "-q", "-o", str(out)]))
    assert code == ExitCodes.FILE_ERROR.value


@pytest.mark.parametrize("argv,expected", [
    (["-w", "x"], "json"),
    (["-w", "x", "-o", "out.CSV"], "csv"),
    (["-w", "x", "-o", "out.txt"], "json"),
    (["-w", "x", "-o", "out.csv", "-f", "JSON"], "json"),
])
def test_output_format(argv, expected):
    assert output_format(parse_args(argv)) == expected


def test_workspace_argument_required():
    with pytest.raises(SystemExit):
        parse_args([])


def test_main_exits_with_run_code(tmp_path):
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        with pytest.raises(SystemExit) as exc_info:
            main(["-w", workspace(tmp_path), "-q"])
    finally:
        for handler in list(root.handlers):
            if handler not in saved_handlers:
                root.removeHandler(handler)
        root.setLevel(saved_level)
    assert exc_info.value.code == ExitCodes.SUCCESS.value
