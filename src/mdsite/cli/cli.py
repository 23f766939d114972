"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import list_cmd, render_cmd, series_cmd, show_cmd, tags_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Query and render a markdown content corpus")

app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="tags")(tags_cmd)
app.command(name="series")(series_cmd)
app.command(name="render")(render_cmd)
