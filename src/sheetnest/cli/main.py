"""Typer CLI for sheet nesting."""

import typer

from sheetnest.cli.commands import nest_command, validate_command

app = typer.Typer(
    name="sheetnest",
    help="Pack rectangular parts onto stock sheets.",
)

app.command(name="nest")(nest_command)
app.command(name="validate")(validate_command)


if __name__ == "__main__":
    app()
