"""Output routing for the CLI.

user_output() is for humans and goes to stderr so that stdout stays clean for
values other tools may consume through machine_output().
"""

import sys

import click


def user_output(message: str = "", *, nl: bool = True) -> None:
    """Print a message meant for a person reading the terminal (stderr)."""
    click.echo(message, err=True, nl=nl)
    sys.stderr.flush()


def machine_output(message: str = "", *, nl: bool = True) -> None:
    """Print a value meant to be captured by scripts (stdout)."""
    click.echo(message, nl=nl)
