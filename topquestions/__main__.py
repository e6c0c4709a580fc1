"""Allow running as `python -m topquestions`."""

from topquestions.cli.main import cli


cli()
