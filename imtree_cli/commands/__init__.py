"""
CLI command modules.
"""

from imtree_cli.commands import build, demo, prove, verify

__all__ = ["build", "demo", "prove", "verify"]
