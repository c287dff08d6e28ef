# type: ignore
import os

from invoke import task


@task
def venv(ctx):
    """Create the virtual environment and install loadlink with dev extras."""
    print("Syncing development environment with uv...")
    ctx.run("uv sync --all-extras")
    print("Done.")


@task
def clean(ctx):
    """
    Remove build output, caches and coverage data.
    """
    ctx.run("rm -rf dist build .pytest_cache .mypy_cache .ruff_cache .coverage")
    ctx.run("find . -name __pycache__ -type d -prune -exec rm -rf {} +")


@task
def lint(ctx):
    """
    Run ruff and mypy over the package and tests.
    """
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """
    Run tests with coverage information.
    """
    ctx.run("pytest --cov=loadlink --cov-report=term-missing", pty=True)


@task
def mock(ctx, port=8080):
    """Serve the mock device on localhost for manual testing."""
    ctx.run(f"loadlink mock --port {port}", pty=True)


@task
def build_package(ctx):
    """
    Build sdist and wheel with uv.
    """
    ctx.run("rm -rf dist")
    ctx.run("uv build")


@task
def release(ctx):
    """Lint, test, build and publish to PyPI using uv."""
    token = os.getenv("PYPI_TOKEN")
    if not token:
        raise ValueError("PYPI_TOKEN environment variable is not set")

    ctx.run("invoke lint test build-package")
    print("Publishing to PyPI...")
    ctx.run(f"uv publish --token {token}")
