"""Subprocess executors for the claude and Node.js toolchains."""

from m2cv.executor.claude import ClaudeExecutor, ExecuteRequest, TextGenerator
from m2cv.executor.find import (
    ExecutableLocation,
    FindOptions,
    LookupStrategy,
    fallback_directories,
    find_node_executable,
)
from m2cv.executor.npm import NpmExecutor, is_package_installed
from m2cv.executor.process import CapturedOutput, run_captured

__all__ = [
    "CapturedOutput",
    "ClaudeExecutor",
    "ExecutableLocation",
    "ExecuteRequest",
    "FindOptions",
    "LookupStrategy",
    "NpmExecutor",
    "TextGenerator",
    "fallback_directories",
    "find_node_executable",
    "is_package_installed",
    "run_captured",
]
