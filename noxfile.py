import nox


@nox.session
def tests(session: nox.Session) -> None:
    """Run the test suite."""
    session.install("-e", ".[test]")
    session.run("pytest")

@nox.session
def smoke(session: nox.Session) -> None:
    """Ensure the package imports and the CLI runs in a clean environment."""
    session.install("-e", ".")
    session.run("python", "-c", "import circlag")
    session.run("circlag", "circular", "--u", "1", "2", "--v", "3", "--sort")
