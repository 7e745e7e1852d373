import typer

from canopy.cli.commands.generate import generate_command
from canopy.cli.commands.simulate import simulate_command

app = typer.Typer(help="Grow an animated L-system tree from an activity score.")

app.command(name="generate")(generate_command)
app.command(name="simulate")(simulate_command)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
