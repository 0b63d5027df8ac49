"""Resolve the project root for Rust tool invocations in an editor workspace."""

__version__ = "0.1.0"
