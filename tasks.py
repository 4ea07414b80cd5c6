"""Invoke tasks for building, testing, and linting Labelspace.

Every task shells out to the `uv` CLI so local runs match CI.
"""

from __future__ import annotations

import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
DIST_DIR = PROJECT_ROOT / "dist"
SOURCE_DIRS = ("src", "tests")


def _uv(ctx: Context, args: Sequence[str], *, dry_run: bool = False) -> None:
    """Run `uv` with ``args``, or only print the command when ``dry_run`` is set."""
    command = shlex.join(("uv", *args))
    if dry_run:
        print(f"[dry-run] {command}")
        return
    ctx.run(command, echo=True, pty=True)


@task(help={"dev": "Install the dev extra (pytest, ruff, mypy, invoke)."})
def sync(ctx: Context, dev: bool = True) -> None:
    """Synchronize the virtual environment with pyproject.toml."""
    _uv(ctx, ["sync", "--extra", "dev"] if dev else ["sync"])


@task(help={"clean": "Remove dist/ before building."})
def build(ctx: Context, clean: bool = False) -> None:
    """Build sdist and wheel into dist/."""
    if clean and DIST_DIR.exists():
        shutil.rmtree(DIST_DIR)
    _uv(ctx, ["build"])


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "options": "Extra flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", options: str = "") -> None:
    """Run the pytest suite."""
    args = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    args.extend(shlex.split(options))
    _uv(ctx, args)


@task(help={"fix": "Apply Ruff auto-fixes."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _uv(ctx, ["run", "ruff", "format", "--check", *SOURCE_DIRS])
    _uv(ctx, ["run", "ruff", "check", *SOURCE_DIRS, *(["--fix"] if fix else [])])


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _uv(ctx, ["run", "mypy", "src/labelspace"])


@task(pre=[lint, mypy, tests])
def ci(ctx: Context) -> None:
    """Run lint, type checks, and tests as CI does."""


namespace = Collection(sync, build, tests, lint, mypy, ci)
