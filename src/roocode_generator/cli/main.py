import typer

from .commands import config, llm

app = typer.Typer(help="RooCode Generator CLI")

# Include sub-commands
app.add_typer(llm.app, name="llm", help="Use the configured LLM provider")
app.add_typer(config.app, name="config", help="Manage the LLM configuration file")


def main():
    app()


if __name__ == "__main__":
    main()
