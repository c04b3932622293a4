from __future__ import annotations

import typer

from catrolls.core.seed import MAX_SEED, advance_many, retreat_many

app = typer.Typer(add_completion=False, no_args_is_help=True)


def _check(seed: int) -> int:
    if not (0 <= seed < MAX_SEED):
        raise typer.BadParameter(f"seed must be in [0, {MAX_SEED}), got: {seed}")
    return seed


@app.command()
def advance(
    seed: int = typer.Argument(..., help="32-bit seed"),
    steps: int = typer.Option(1, help="How many draws to move forward"),
):
    """Print the seed `steps` draws later."""
    typer.echo(advance_many(_check(seed), steps))


@app.command()
def retreat(
    seed: int = typer.Argument(..., help="32-bit seed"),
    steps: int = typer.Option(1, help="How many draws to move back"),
):
    """Print the seed `steps` draws earlier."""
    typer.echo(retreat_many(_check(seed), steps))


if __name__ == "__main__":
    app()
