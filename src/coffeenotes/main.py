"""Application entry point for Coffee Notes server."""

from coffeenotes.app import App
from coffeenotes.config import Config
from coffeenotes.logging import setup_logging
from coffeenotes.web.runner import run_server


def main() -> None:
    config = Config()
    setup_logging(config.debug)
    app = App(config)
    run_server(app, config)


if __name__ == "__main__":
    main()
