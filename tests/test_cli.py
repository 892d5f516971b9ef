from pathlib import Path

import pytest

from doxyfile import cli


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def test_render_to_stdout(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(tmp_path / "Doxyfile.in", "INPUT =<%= input %>\nPROJECT_NUMBER = <%= version %>\n")

    rc = cli.main(["render", str(template), "--input", "src", "--input", "include", "--version", "1.0"])

    assert rc == 0
    assert capsys.readouterr().out == "INPUT = src include\nPROJECT_NUMBER = 1.0\n"


def test_render_sample_template_to_file(templates_dir: Path, tmp_path: Path) -> None:
    output = tmp_path / "doc" / "Doxyfile"

    rc = cli.main(
        [
            "render",
            str(templates_dir / "Doxyfile.in"),
            "--config",
            str(templates_dir / "doxyfile.yaml"),
            "--commit-number",
            "15",
            "-o",
            str(output),
        ]
    )

    assert rc == 0
    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("PROJECT_NAME")
    assert "PROJECT_NUMBER         = 0.1.0-15" in lines
    assert "INPUT                  = README.md include" in lines
    assert "EXAMPLE_PATH           = example" in lines
    assert "STRIP_FROM_PATH        = include" in lines
    assert "USE_MDFILE_AS_MAINPAGE = README.md" in lines


def test_cli_overrides_replace_config_lists(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(
        tmp_path / "Doxyfile.in",
        "<%= input %>|<%= example_path %>|<%= strip_from_path %>|<%= use_mdfile_as_mainpage %>",
    )
    config = _write(
        tmp_path / "doxyfile.yaml",
        "input: [src]\nexample_path: [example]\nstrip_from_path: [src]\nuse_mdfile_as_mainpage: README.md\n",
    )

    rc = cli.main(["render", str(template), "--config", str(config), "--input", "lib"])

    assert rc == 0
    assert capsys.readouterr().out == " lib| example| src|README.md"

    rc = cli.main(
        [
            "-v",
            "render",
            str(template),
            "--config",
            str(config),
            "--example-path",
            "demo",
            "--example-path",
            "samples",
            "--strip-from-path",
            "lib",
            "--mainpage",
            "docs/index.md",
        ]
    )

    captured = capsys.readouterr()
    assert rc == 0
    assert captured.out == " src| demo samples| lib|docs/index.md"
    assert "DEBUG" in captured.err
    assert "Rendering" in captured.err


def test_commit_from_git_rejects_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(tmp_path / "Doxyfile.in", "<%= commit_number %>")

    rc = cli.main(["render", str(template), "--commit-from-git", str(template)])

    captured = capsys.readouterr()
    assert rc == 1
    assert captured.out == ""
    assert "not a directory" in captured.err


def test_commit_from_git_rejects_missing_dir(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(tmp_path / "Doxyfile.in", "<%= commit_number %>")

    rc = cli.main(["render", str(template), "--commit-from-git", str(tmp_path / "missing")])

    captured = capsys.readouterr()
    assert rc == 1
    assert "does not exist" in captured.err
    assert "Command not found" not in captured.err


def test_run_wraps_os_errors(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    def raise_permission(*args: object, **kwargs: object) -> None:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(cli.subprocess, "run", raise_permission)
    with pytest.raises(cli.CLIError, match="Failed running command"):
        cli._run(["git", "status"], cwd=tmp_path)


def test_bad_config_path_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(tmp_path / "Doxyfile.in", "<%= version %>")

    rc = cli.main(["render", str(template), "--config", str(tmp_path)])

    assert rc == 1
    assert "Failed reading config file" in capsys.readouterr().err


def test_commit_from_git(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    calls: list[tuple[list[str], Path]] = []

    def fake_run(cmd: list[str], *, cwd: Path) -> str:
        calls.append((cmd, cwd))
        return "321"

    monkeypatch.setattr(cli, "_run", fake_run)
    template = _write(tmp_path / "Doxyfile.in", "<%= commit_number %>")

    rc = cli.main(["render", str(template), "--commit-from-git", str(tmp_path)])

    assert rc == 0
    assert capsys.readouterr().out == "321"
    assert calls == [(["git", "rev-list", "--count", "HEAD"], tmp_path)]


def test_explicit_commit_number_wins_over_git(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    def fail_run(cmd: list[str], *, cwd: Path) -> str:
        raise AssertionError("git must not be called")

    monkeypatch.setattr(cli, "_run", fail_run)
    template = _write(tmp_path / "Doxyfile.in", "<%= commit_number %>")

    rc = cli.main(["render", str(template), "--commit-from-git", "--commit-number", "9"])

    assert rc == 0
    assert capsys.readouterr().out == "9"


def test_git_commit_count_rejects_garbage(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(cli, "_run", lambda cmd, *, cwd: "fatal: not a git repository")
    with pytest.raises(cli.CLIError):
        cli.git_commit_count(tmp_path)


def test_unknown_field_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(tmp_path / "Doxyfile.in", "X = <%= nonexistent %>")

    rc = cli.main(["render", str(template)])

    captured = capsys.readouterr()
    assert rc == 1
    assert captured.out == ""
    assert "nonexistent" in captured.err


def test_missing_template_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    rc = cli.main(["render", str(tmp_path / "nope.in")])

    assert rc == 1
    assert "does not exist" in capsys.readouterr().err


def test_bad_config_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    template = _write(tmp_path / "Doxyfile.in", "<%= version %>")
    config = _write(tmp_path / "doxyfile.yaml", "project: blink\n")

    rc = cli.main(["render", str(template), "--config", str(config)])

    assert rc == 1
    assert "project" in capsys.readouterr().err


def test_missing_subcommand_is_usage_error() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([])
    assert excinfo.value.code == 2
