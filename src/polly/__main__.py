"""Allow ``python -m polly``."""

from polly.cli import app

if __name__ == "__main__":
    app(prog_name="polly")
