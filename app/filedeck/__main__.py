"""Allow running filedeck as ``python -m filedeck``."""

from filedeck.cli.main import app

if __name__ == "__main__":
    app()
