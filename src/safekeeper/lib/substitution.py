# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Template substitution engine.

A run takes one input path ``P``, reads the template ``P.safekeeper``,
replaces every ``ENV_<KEY>`` token with the value of the environment
variable ``KEY`` and writes a generated-file header followed by the
rewritten template to ``P`` (or to the ``--output`` override).

Template lines carrying a ``go:generate safekeeper`` directive are dropped:
the header already holds the canonical directive for the current flags.
"""

import os
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from .core.config import DEFAULT_OUTPUT_MODE
from .errors import (
    MissingEnvironmentVariable,
    ReadFailure,
    TemplateNotFound,
    UnsupportedInput,
)
from .util.fs import write_atomic
from .util.logging_utils import _log_debug

TOOL_NAME = "safekeeper"
TEMPLATE_SUFFIX = ".safekeeper"
TOKEN_PREFIX = "ENV_"
GENERATE_MARKER = "go:generate"
HEADER_WARNING = (
    "// GENERATED by safekeeper (https://github.com/alexandre-normand/safekeeper), DO NOT EDIT"
)


@dataclass(frozen=True)
class SubstitutionConfig:
    """Everything a run needs besides the input path.

    ``output`` is kept exactly as the caller spelled it so the header can
    reproduce the invocation.
    """

    keys: tuple[str, ...]
    output: str | None = None
    output_mode: int = DEFAULT_OUTPUT_MODE

    @classmethod
    def from_flags(
        cls, keys: str, output: str | None = None, *, output_mode: int = DEFAULT_OUTPUT_MODE
    ) -> "SubstitutionConfig":
        """Build a config from the raw ``--keys``/``--output`` flag values."""
        return cls(keys=tuple(keys.split(",")), output=output or None, output_mode=output_mode)


@dataclass(frozen=True)
class Replacer:
    """Literal ``token`` -> ``value`` substitution for a single key."""

    token: str
    value: str

    def replace(self, line: str) -> str:
        return line.replace(self.token, self.value)


def load_key_values(
    keys: Iterable[str], environ: Mapping[str, str] | None = None
) -> Mapping[str, str]:
    """Resolve each key against the environment, in the order given.

    Raises MissingEnvironmentVariable for the first key that is unset or empty.
    """
    env = os.environ if environ is None else environ
    key_values: dict[str, str] = {}
    for key in keys:
        value = env.get(key)
        if not value:
            raise MissingEnvironmentVariable(key)
        key_values[key] = value
    return MappingProxyType(key_values)


def setup_replacers(key_values: Mapping[str, str]) -> list[Replacer]:
    """Create one replacer per key/value pair."""
    return [Replacer(f"{TOKEN_PREFIX}{key}", value) for key, value in key_values.items()]


def resolve_input(paths: Sequence[str | os.PathLike]) -> Path:
    """Return the single input file path, rejecting any other input shape."""
    if len(paths) != 1:
        raise UnsupportedInput(
            f"Only single file inputs are currently supported (got {len(paths)} paths)"
        )
    path = Path(paths[0])
    if path.is_dir():
        raise UnsupportedInput(
            f"Only single file inputs are currently supported ({path} is a directory)"
        )
    return path


def template_path_for(path: Path) -> Path:
    """Return the template location for *path* (``<path>.safekeeper``)."""
    return Path(f"{path}{TEMPLATE_SUFFIX}")


def is_generate_directive(line: str) -> bool:
    """True for a ``go:generate`` line that invokes safekeeper."""
    return GENERATE_MARKER in line and TOOL_NAME in line


def render_header(config: SubstitutionConfig, template_path: Path) -> str:
    """Return the generated-file header (warning, directive, source reference)."""
    directive = f"//{GENERATE_MARKER} {TOOL_NAME} --keys={','.join(config.keys)}"
    if config.output:
        directive += f" --output={config.output}"
    directive += " $GOFILE"
    return f"{HEADER_WARNING}\n{directive}\n// Source: {template_path.name}\n"


def substitute_values(lines: Iterable[str], replacers: Sequence[Replacer]) -> Iterator[str]:
    """Yield each template line rewritten by *replacers*, newline-terminated.

    Directive lines (see is_generate_directive) are skipped.
    """
    for line in lines:
        line = line.rstrip("\n")
        if is_generate_directive(line):
            _log_debug(f"dropped template directive: {line.strip()}")
            continue
        for replacer in replacers:
            line = replacer.replace(line)
        yield line + "\n"


class Substituter:
    """Runs the substitution pipeline for a fixed :class:`SubstitutionConfig`."""

    def __init__(
        self, config: SubstitutionConfig, environ: Mapping[str, str] | None = None
    ) -> None:
        self.config = config
        self._environ = environ

    def output_path_for(self, path: Path) -> Path:
        return Path(self.config.output) if self.config.output else path

    def render(self, path: Path, key_values: Mapping[str, str]) -> str:
        """Return the full output (header + body) for input *path*."""
        template = template_path_for(path)
        try:
            f = open(template, encoding="utf-8", errors="surrogateescape")
        except OSError as e:
            raise TemplateNotFound(f"template not found: {template} ({e.strerror or e})") from e

        replacers = setup_replacers(key_values)
        buffer = [render_header(self.config, template)]
        with f:
            try:
                buffer.extend(substitute_values(f, replacers))
            except OSError as e:
                raise ReadFailure(f"reading template {template}: {e}") from e

        _log_debug(f"rendered {template} ({len(buffer) - 1} lines)")
        return "".join(buffer)

    def run(self, paths: Sequence[str | os.PathLike]) -> Path:
        """Substitute values into the template for *paths* and write the output.

        Nothing is written unless every key resolves and the whole template
        is read. Returns the path written.
        """
        key_values = load_key_values(self.config.keys, self._environ)
        _log_debug(f"resolved keys: {', '.join(key_values)}")

        path = resolve_input(paths)
        content = self.render(path, key_values)

        out = self.output_path_for(path)
        write_atomic(out, content, self.config.output_mode)
        _log_debug(f"wrote {out}")
        return out
