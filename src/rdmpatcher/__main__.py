"""Entry point for running rdmpatcher as a module."""

from rdmpatcher.cli.main import cli

if __name__ == "__main__":
    cli()
