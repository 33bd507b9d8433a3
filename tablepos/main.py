"""Entry point for the tablepos Textual app."""

from __future__ import annotations

from tablepos.logging_setup import configure_logging
from tablepos.pos_app import PosApp


def main() -> None:
    """Run the Textual application."""
    configure_logging()
    PosApp().run()


if __name__ == "__main__":
    main()
