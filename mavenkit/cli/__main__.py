"""
Entry point for running MavenKit CLI as a module.

Usage: python -m mavenkit.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
