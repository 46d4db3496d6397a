import typer

from codex_docs.cli.generate import generate

app = typer.Typer(
    name="codex-docs",
    help="Codex Docs CLI: generate documentation objects from JavaScript sources.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("generate")(generate)


@app.callback()
def callback() -> None:
    """Codex Docs CLI."""


def main() -> None:
    app()
