"""CLI entrypoint: Typer app definition and command registration"""

import typer

from pagewrap.cli.commands import build_cmd, wrap_cmd


app = typer.Typer(name="pagewrap", no_args_is_help=True, help="Markdown and component pages wrapped in a shared layout")

app.command(name="build")(build_cmd)
app.command(name="wrap")(wrap_cmd)
