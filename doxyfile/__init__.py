"""
doxyfile package

This package renders Doxygen configuration files from templates.

Key responsibilities are split across modules:
- `config_parser.py`: load field values from a YAML file into a typed model
- `renderer.py`: substitute field values into a Doxyfile template
- `cli.py`: CLI entrypoint and orchestration (config -> overrides -> render -> write)
"""

from __future__ import annotations

from doxyfile.config_parser import ConfigError, DoxyfileConfig, load_config, parse_config
from doxyfile.renderer import RenderContext, RenderError, UnresolvedFieldError, joined_paths

__all__ = [
    "ConfigError",
    "DoxyfileConfig",
    "RenderContext",
    "RenderError",
    "UnresolvedFieldError",
    "__version__",
    "joined_paths",
    "load_config",
    "parse_config",
]

__version__ = "0.1.0"
