"""Invoke tasks for testing, linting, and formatting.

Run tasks with: invoke TASK_NAME

Test Examples:
    invoke test              # Run all tests
    invoke test.unit        # Run unit tests only
    invoke test.api         # Run API endpoint tests only
    invoke test.coverage    # Generate coverage reports

Linting Examples:
    invoke lint.flake8      # Check code style with flake8
    invoke lint.black       # Format code with black
    invoke lint.black-check # Check if code needs formatting
"""

from invoke import Collection, task


@task(help={"verbose": "Show verbose output"})
def test(ctx, verbose=False):
    """Run all tests."""
    cmd = "pytest"
    if verbose:
        cmd += " -v"
    ctx.run(cmd)


@task
def unit(ctx):
    """Run unit tests only."""
    ctx.run("pytest -m unit")


@task
def api(ctx):
    """Run API endpoint tests only."""
    ctx.run("pytest -m api")


@task(help={"file": "Specific test file to run", "name": "Test name or pattern"})
def specific(ctx, file=None, name=None):
    """Run specific test file, class, or function.

    Examples:
        invoke test.specific --file tests/unit/test_client.py
        invoke test.specific --file tests/unit/test_client.py --name TestFetchTags
    """
    if not file and not name:
        print("Error: Please specify --file and/or --name")
        return

    cmd = "pytest"
    if file:
        cmd += f" {file}"
    if name:
        cmd += f"::{name}" if file else f" -k {name}"

    ctx.run(cmd)


@task
def coverage(ctx):
    """Generate HTML, terminal and XML coverage reports."""
    ctx.run("pytest --cov=regskin --cov-report=html --cov-report=term-missing --cov-report=xml")
    print("\n✓ Coverage reports generated:")
    print("  - htmlcov/index.html (HTML)")
    print("  - Terminal output above")
    print("  - coverage.xml (XML for CI)")


@task
def debug_logs(ctx):
    """Run tests with debug-level logging."""
    ctx.run("pytest --log-cli-level=DEBUG")


@task
def ci(ctx):
    """Run all tests as if in CI (with XML coverage)."""
    ctx.run("pytest --cov=regskin --cov-report=xml")


@task(help={"src": "Path to check (default: regskin)"})
def flake8(ctx, src="regskin"):
    """Run flake8 style checker."""
    ctx.run(f"flake8 {src}")


@task(help={"check": "Check only, don't modify files"})
def black(ctx, check=False):
    """Format code with black."""
    cmd = "black regskin tests tasks.py"
    if check:
        cmd += " --check"
    ctx.run(cmd)


@task
def black_check(ctx):
    """Check if code needs black formatting."""
    ctx.run("black regskin tests tasks.py --check")


test_ns = Collection("test")
test_ns.add_task(test, default=True)
test_ns.add_task(unit)
test_ns.add_task(api)
test_ns.add_task(specific)
test_ns.add_task(coverage)
test_ns.add_task(debug_logs)
test_ns.add_task(ci)

lint_ns = Collection("lint")
lint_ns.add_task(flake8)
lint_ns.add_task(black)
lint_ns.add_task(black_check)

ns = Collection(test_ns, lint_ns)
