"""Development tasks for persistctl.

Usage: python devops.py <task>
Tasks: fmt, lint, test, clean
"""

import subprocess
import sys

import typer

app = typer.Typer(help="persistctl development tasks.", no_args_is_help=True)


def _run(commands: list[list[str]]) -> None:
    """Execute a sequence of commands, exiting on first failure."""
    for cmd in commands:
        typer.echo(f"$ {' '.join(cmd)}")
        try:
            subprocess.run(cmd, check=True)  # nosec: B603, B607
        except subprocess.CalledProcessError as e:
            print(f"Command failed: {' '.join(e.cmd)}", file=sys.stderr)
            sys.exit(e.returncode)


@app.command("fmt")
def format_code() -> None:
    """Format the codebase with Ruff."""
    _run([["ruff", "format", "."], ["ruff", "check", "--fix", "."]])


@app.command("lint")
def lint() -> None:
    """Check formatting and lint rules without changing files."""
    _run([["ruff", "format", "--check", "."], ["ruff", "check", "."]])


@app.command("test")
def test(
    integration: bool = typer.Option(False, "--integration", help="Only run integration tests."),
) -> None:
    """Run the test suite with pytest."""
    target = "tests/integration" if integration else "tests"
    _run([["pytest", "-q", target]])


@app.command("clean")
def clean() -> None:
    """Remove caches and build artifacts."""
    _run(
        [
            ["find", ".", "-type", "d", "-name", "__pycache__", "-exec", "rm", "-rf", "{}", "+"],
            ["rm", "-rf", ".pytest_cache", ".ruff_cache", "dist", "build"],
        ]
    )


if __name__ == "__main__":
    app()
