import json

import pytest

from regcheck.scripts import scan


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in (
        "REGCHECK_ENABLED_MODULES",
        "REGCHECK_MAX_WORKERS",
        "REGCHECK_MODULE_CONFIG",
        "REGCHECK_AUDIT_LOG",
        "REGCHECK_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_scan_writes_json_html_and_audit(tmp_path):
    source = _write(tmp_path, "handler.py", "def handler(user):\n    return user.email\n")
    json_out = tmp_path / "out" / "report.json"
    html_out = tmp_path / "out" / "report.html"
    audit = tmp_path / "out" / "audit.jsonl"

    exit_code = scan.main(
        [
            str(source),
            "--modules",
            "gdpr,cafe",
            "--json-out",
            str(json_out),
            "--html-out",
            str(html_out),
            "--audit-log",
            str(audit),
        ]
    )

    assert exit_code == 0
    payload = json.loads(json_out.read_text(encoding="utf-8"))
    assert list(payload) == [str(source)]
    assert list(payload[str(source)]["module_results"]) == ["cafe", "gdpr"]
    assert "handler.py" in html_out.read_text(encoding="utf-8")
    assert len(audit.read_text(encoding="utf-8").splitlines()) == 1


def test_scan_prints_json_and_fails_on_violation(tmp_path, capsys):
    source = _write(tmp_path, "notes.txt", "store user email")

    exit_code = scan.main([str(source), "--modules", "gdpr", "--fail-on-violation"])

    assert exit_code == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload[str(source)]["overall_compliant"] is False


def test_scan_context_and_disable(tmp_path, capsys):
    source = _write(tmp_path, "code.py", "x = 1\n")

    exit_code = scan.main(
        [str(source), "--context", '{"developer_hours": 12}', "--disable", "cafe", "--workers", "2"]
    )

    assert exit_code == 0
    report = json.loads(capsys.readouterr().out)[str(source)]
    assert "cafe" not in report["module_results"]
    osha_types = [v["type"] for v in report["module_results"]["osha"]["violations"]]
    assert osha_types == ["OVERTIME_INDICATOR"]


def test_scan_html_per_file_when_several_inputs(tmp_path):
    first = _write(tmp_path, "a.py", "x = 1\n")
    second = _write(tmp_path, "b.py", "y = 2\n")
    html_out = tmp_path / "report.html"

    assert scan.main([str(first), str(second), "--html-out", str(html_out)]) == 0
    assert (tmp_path / "report-a.html").exists()
    assert (tmp_path / "report-b.html").exists()


def test_scan_module_config_file(tmp_path, capsys):
    config = _write(tmp_path, "modules.json", json.dumps({"cafe": {"energy_threshold": 0.001}}))
    source = _write(tmp_path, "loop.py", "for x in y:\n    pass\n")

    scan.main([str(source), "--modules", "cafe", "--module-config", str(config)])

    report = json.loads(capsys.readouterr().out)[str(source)]
    assert report["module_results"]["cafe"]["violations"][0]["type"] == "ENERGY_EFFICIENCY"


def test_list_modules_and_requirements(capsys):
    assert scan.main(["--list-modules", "--modules", "hipaa"]) == 0
    listing = json.loads(capsys.readouterr().out)
    assert [entry["name"] for entry in listing][:2] == ["cafe", "hipaa"]
    assert {entry["name"]: entry["enabled"] for entry in listing}["hipaa"] is True
    assert {entry["name"]: entry["enabled"] for entry in listing}["cafe"] is False

    assert scan.main(["--requirements", "--modules", "osha"]) == 0
    requirements = json.loads(capsys.readouterr().out)
    assert list(requirements) == ["osha"]


def test_input_errors(tmp_path, capsys):
    assert scan.main([str(tmp_path / "missing.py")]) == 2
    assert scan.main([str(_write(tmp_path, "a.py", "x")), "--context", "[1]"]) == 2
    assert "ERROR" in capsys.readouterr().err

    with pytest.raises(SystemExit):
        scan.main([])
    with pytest.raises(SystemExit):
        scan.main(["a.py", "--workers", "0"])


def test_invalid_environment_is_reported(tmp_path, monkeypatch):
    monkeypatch.setenv("REGCHECK_MAX_WORKERS", "many")
    assert scan.main([str(_write(tmp_path, "a.py", "x"))]) == 2


def test_unwritable_audit_log_is_reported(tmp_path, capsys):
    source = _write(tmp_path, "a.py", "x = 1\n")
    audit_dir = tmp_path / "audit-is-a-directory"
    audit_dir.mkdir()

    assert scan.main([str(source), "--audit-log", str(audit_dir)]) == 2
    assert "cannot append audit record" in capsys.readouterr().err
