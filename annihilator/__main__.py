"""Main entry point when executing annihilator as a package.

This allows running the package using python -m annihilator.
"""

from annihilator.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
