"""
renderer.py

Responsibility: Render Doxyfile field values into a Doxyfile template string.

Rules:
- Templates use ERB-style delimiters: `<%= expr %>`, `<% stmt %>`, `<%# comment %>`.
- Path list fields render in joined form: each entry prefixed by one space.
- A reference to a name that is not a field fails with UnresolvedFieldError.
- Rendering is a pure read of the current field values.

This module intentionally does NOT read or write files.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from jinja2 import Environment, StrictUndefined, TemplateSyntaxError, UndefinedError, meta

from doxyfile.config_parser import DoxyfileConfig


class RenderError(RuntimeError):
    pass


class UnresolvedFieldError(RenderError):
    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.name = name


def joined_paths(paths: Iterable[str]) -> str:
    """
    Join paths into the form Doxygen list options expect: " a b c".
    """
    return "".join(f" {p}" for p in paths)


def _path_list(paths: Iterable[str]) -> list[str]:
    if isinstance(paths, str):
        raise TypeError("Path list fields take an iterable of paths, not a single string.")
    return list(paths)


def _blank_none(value: Any) -> Any:
    return "" if value is None else value


# Jinja2 globals templates may use besides the Doxyfile fields.
TEMPLATE_GLOBALS = ("range",)


def make_environment() -> Environment:
    env = Environment(
        block_start_string="<%",
        block_end_string="%>",
        variable_start_string="<%=",
        variable_end_string="%>",
        comment_start_string="<%#",
        comment_end_string="%>",
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        finalize=_blank_none,
    )
    env.globals = {name: env.globals[name] for name in TEMPLATE_GLOBALS}
    return env


class RenderContext:
    """
    Holds a Doxyfile template and the field values substituted into it.

    Scalar fields are stored and rendered as given. Path list fields are
    assigned as a whole and read back in joined form; the raw entries are
    available via the `*_paths` properties.
    """

    def __init__(self, template: str, config: DoxyfileConfig | None = None) -> None:
        self._template = str(template)
        self.commit_number: str = ""
        self.version: str = ""
        self.use_mdfile_as_mainpage: str | None = None
        self._input: list[str] = []
        self._example_path: list[str] = []
        self._strip_from_path: list[str] = []
        if config is not None:
            self.apply(config)

    @property
    def template(self) -> str:
        return self._template

    def apply(self, config: DoxyfileConfig) -> None:
        self.commit_number = config.commit_number
        self.version = config.version
        self.use_mdfile_as_mainpage = config.use_mdfile_as_mainpage
        self.input = config.input
        self.example_path = config.example_path
        self.strip_from_path = config.strip_from_path

    @property
    def input(self) -> str:
        return joined_paths(self._input)

    @input.setter
    def input(self, paths: Iterable[str]) -> None:
        self._input = _path_list(paths)

    @property
    def input_paths(self) -> tuple[str, ...]:
        return tuple(self._input)

    @property
    def example_path(self) -> str:
        return joined_paths(self._example_path)

    @example_path.setter
    def example_path(self, paths: Iterable[str]) -> None:
        self._example_path = _path_list(paths)

    @property
    def example_paths(self) -> tuple[str, ...]:
        return tuple(self._example_path)

    @property
    def strip_from_path(self) -> str:
        return joined_paths(self._strip_from_path)

    @strip_from_path.setter
    def strip_from_path(self, paths: Iterable[str]) -> None:
        self._strip_from_path = _path_list(paths)

    @property
    def strip_from_path_paths(self) -> tuple[str, ...]:
        return tuple(self._strip_from_path)

    def fields(self) -> dict[str, Any]:
        # Deterministic keys; templates should reference these.
        return {
            "commit_number": self.commit_number,
            "version": self.version,
            "use_mdfile_as_mainpage": self.use_mdfile_as_mainpage,
            "input": self.input,
            "example_path": self.example_path,
            "strip_from_path": self.strip_from_path,
        }

    def render(self) -> str:
        """
        Substitute the current field values into the template.

        Raises UnresolvedFieldError if the template references a name that is
        not a field, and RenderError if the template cannot be parsed.
        """
        env = make_environment()
        context = self.fields()

        try:
            ast = env.parse(self._template)
        except TemplateSyntaxError as e:
            raise RenderError(f"Invalid Doxyfile template (line {e.lineno}): {e.message}") from e

        unresolved = sorted(meta.find_undeclared_variables(ast) - set(context) - set(env.globals))
        if unresolved:
            raise UnresolvedFieldError(
                f"Template references unknown field(s): {', '.join(unresolved)}",
                name=unresolved[0],
            )

        try:
            return env.from_string(ast).render(**context)
        except UndefinedError as e:
            raise UnresolvedFieldError(f"Template references an undefined value: {e}") from e
        except Exception as e:  # noqa: BLE001 - surface as RenderError
            raise RenderError("Failed rendering Doxyfile template") from e
