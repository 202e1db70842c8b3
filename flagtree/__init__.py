"""
flagtree CLI Toolkit

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

import logging

from .command import Command
from .command_types import CommandConfig, Example, Language, MutexGroup, RequiredGroup
from .exceptions import (
    AlreadyExistsError,
    CyclicReferenceError,
    EnvOverlayError,
    FlagTreeError,
    FlagValidationError,
    InvalidGroupMemberError,
    InvalidNameError,
    MutexGroupViolationError,
    NotFoundError,
    ParseFailedError,
    RequiredGroupViolationError,
)
from .registry import Registry
from .signals import CompletionSignal, FlowSignal, HelpSignal, VersionSignal

logger = logging.getLogger("flagtree")

__version__ = "0.1.0"

__all__ = [
    "Command",
    "CommandConfig",
    "Example",
    "Language",
    "MutexGroup",
    "RequiredGroup",
    "Registry",
    "FlagTreeError",
    "InvalidNameError",
    "AlreadyExistsError",
    "NotFoundError",
    "FlagValidationError",
    "EnvOverlayError",
    "ParseFailedError",
    "MutexGroupViolationError",
    "RequiredGroupViolationError",
    "InvalidGroupMemberError",
    "CyclicReferenceError",
    "FlowSignal",
    "HelpSignal",
    "VersionSignal",
    "CompletionSignal",
]
