"""Allow ``python -m mimecraft``."""

from mimecraft.cli import app

if __name__ == "__main__":
    app()
