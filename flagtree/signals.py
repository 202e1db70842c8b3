# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines flow control signals raised by the flagtree execution wiring.

These signals are raised after a builtin flag (`--help`, `--version`,
`--completion`) has written its output, so the host program can stop normal
execution without the library ever exiting the process.

All signals inherit from `FlowSignal`, which is a subclass of `BaseException`
to ensure they bypass standard `except Exception` blocks.

Signals:
- HelpSignal: Help text was shown.
- VersionSignal: Version string was shown.
- CompletionSignal: A shell completion script was written.
"""


class FlowSignal(BaseException):
    """Base class for all flow control signals in flagtree.

    These are not errors. They tell the caller that a builtin flag already
    produced its output and the command itself should not run.
    """


class HelpSignal(FlowSignal):
    """Raised after help information was displayed."""

    def __init__(self, message: str = "Help signal received."):
        super().__init__(message)


class VersionSignal(FlowSignal):
    """Raised after version information was displayed."""

    def __init__(self, message: str = "Version signal received."):
        super().__init__(message)


class CompletionSignal(FlowSignal):
    """Raised after a completion script was written."""

    def __init__(self, message: str = "Completion signal received."):
        super().__init__(message)
