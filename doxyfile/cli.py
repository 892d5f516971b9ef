"""
cli.py

Responsibility: CLI entrypoint for doxyfile-builder.

High-level flow (single command `render`):
1) Load field values from a YAML config (optional)
2) Apply CLI overrides (including the commit count from git)
3) Render the Doxyfile template
4) Write the result to a file or stdout

This module should orchestrate behavior but keep concerns isolated:
- Config parsing: `config_parser.py`
- Rendering: `renderer.py`
"""

from __future__ import annotations

import argparse
import subprocess
import sys
from pathlib import Path

from loguru import logger

from doxyfile.config_parser import ConfigError, DoxyfileConfig, load_config
from doxyfile.renderer import RenderContext, RenderError


class CLIError(RuntimeError):
    pass


LOG_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"


def _setup_logging(verbose: bool) -> None:
    # Stdout carries the rendered Doxyfile; log to stderr only.
    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level="DEBUG" if verbose else "INFO")


def _run(cmd: list[str], *, cwd: Path) -> str:
    """
    Run a subprocess command and return its stripped stdout, raising a CLIError on failure.
    """
    try:
        result = subprocess.run(
            cmd, cwd=str(cwd), check=True, stdout=subprocess.PIPE, stderr=subprocess.STDOUT, text=True
        )
    except FileNotFoundError as e:
        raise CLIError(f"Command not found: {cmd[0]}") from e
    except subprocess.CalledProcessError as e:
        raise CLIError(f"Command failed: {' '.join(cmd)}\n\n{e.stdout}") from e
    except OSError as e:
        raise CLIError(f"Failed running command: {' '.join(cmd)}: {e}") from e
    return result.stdout.strip()


def git_commit_count(repo_dir: str | Path) -> str:
    """
    Number of commits reachable from HEAD, used as the Doxygen build number.
    """
    path = Path(repo_dir)
    if not path.is_dir():
        raise CLIError(f"Git directory does not exist or is not a directory: {path}")
    count = _run(["git", "rev-list", "--count", "HEAD"], cwd=path)
    if not count.isdigit():
        raise CLIError(f"Unexpected output from git rev-list: {count!r}")
    return count


def _read_template(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise CLIError(f"Template file does not exist: {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise CLIError(f"Failed reading template file: {path}") from e


def _write_output(path: Path, text: str) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8", newline="\n")
    except OSError as e:
        raise CLIError(f"Failed writing output file: {path}") from e


def _build_config(args: argparse.Namespace) -> DoxyfileConfig:
    config = load_config(args.config) if args.config else DoxyfileConfig()

    commit_number = args.commit_number
    if commit_number is None and args.commit_from_git is not None:
        commit_number = git_commit_count(args.commit_from_git)
        logger.debug(f"Commit number from git: {commit_number}")

    # CLI overrides
    return config.merged(
        commit_number=commit_number,
        version=args.version,
        use_mdfile_as_mainpage=args.mainpage,
        input=args.input,
        example_path=args.example_path,
        strip_from_path=args.strip_from_path,
    )


def render_cmd(args: argparse.Namespace) -> int:
    template_path = Path(args.template_path)
    template = _read_template(template_path)
    config = _build_config(args)

    context = RenderContext(template, config)
    logger.debug(f"Rendering {template_path} with fields: {context.fields()}")
    text = context.render()

    if args.output:
        output_path = Path(args.output)
        _write_output(output_path, text)
        logger.info(f"Wrote {output_path}")
    else:
        sys.stdout.write(text)

    return 0


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="doxyfile-builder", description="Render a Doxyfile from a template")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    r = sub.add_parser("render", help="Render a Doxyfile template with project fields")
    r.add_argument("template_path", help="Path to the Doxyfile template")
    r.add_argument("--config", default=None, help="YAML file with field values")
    r.add_argument("-o", "--output", default=None, help="Output file (default: stdout)")

    r.add_argument("--version", dest="version", default=None, help="Project version (overrides config)")
    r.add_argument("--commit-number", default=None, help="Commit number (overrides config)")
    r.add_argument(
        "--commit-from-git",
        nargs="?",
        const=".",
        default=None,
        metavar="DIR",
        help="Take the commit number from `git rev-list --count HEAD` in DIR (default: .)",
    )
    r.add_argument("--mainpage", default=None, help="Markdown file used as the main page (overrides config)")

    r.add_argument("--input", action="append", default=None, help="Input path (repeatable, replaces config list)")
    r.add_argument(
        "--example-path", action="append", default=None, help="Example path (repeatable, replaces config list)"
    )
    r.add_argument(
        "--strip-from-path", action="append", default=None, help="Strip-from-path prefix (repeatable, replaces config list)"
    )

    r.set_defaults(func=render_cmd)
    return p


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _setup_logging(bool(args.verbose))
    try:
        return int(args.func(args))
    except (CLIError, ConfigError, RenderError) as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
