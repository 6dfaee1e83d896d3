from invoke import task


@task
def lint(c):
    c.run("ruff check .")


@task
def format_check(c):
    c.run("ruff format --check .")


@task
def test(c):
    c.run("pytest")


@task
def ci(c):
    lint(c)
    format_check(c)
    test(c)


@task
def report(c, log_dir):
    """Write reports for every log file in LOG_DIR."""
    c.run(f"python scripts/report_log_dir.py {log_dir}")
