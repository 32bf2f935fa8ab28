"""
Entry point for running MavenKit CLI as a module.

Usage: python -m mavenkit [command] [options]
"""

from mavenkit.cli.parser import main

if __name__ == "__main__":
    main()
