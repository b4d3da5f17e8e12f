# SPDX-FileCopyrightText: 2025-2026 Jiri Vyskocil <jiri@vyskocil.com>
#
# SPDX-License-Identifier: Apache-2.0

"""Error conditions raised by the substitution engine.

Every error is fatal for the run. The CLI reports the message and exits
non-zero; nothing is retried.
"""


class SafekeeperError(Exception):
    """Base class for all safekeeper failures."""


class MissingEnvironmentVariable(SafekeeperError):
    """A key's environment variable is unset or empty."""

    def __init__(self, key: str) -> None:
        super().__init__(f"Environment variable [{key}] not found")
        self.key = key


class UnsupportedInput(SafekeeperError):
    """The positional paths are not exactly one file."""


class TemplateNotFound(SafekeeperError):
    """The ``<path>.safekeeper`` template could not be opened."""


class ReadFailure(SafekeeperError):
    """Reading the template failed part way through."""


class WriteFailure(SafekeeperError):
    """The generated output could not be written."""
