"""
MavenKit CLI commands.

Each module exposes ``run(args) -> int``.
"""
