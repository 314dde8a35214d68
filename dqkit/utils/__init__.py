"""Utility modules for dqkit."""

from dqkit.utils import env, logging

__all__ = ("env", "logging")
