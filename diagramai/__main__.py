"""Entry point for ``python -m diagramai``."""

from diagramai.api.main import run

if __name__ == "__main__":
    run()
