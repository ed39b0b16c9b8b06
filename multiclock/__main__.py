"""Allow running MultiClock as a module: python -m multiclock."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import MultiClockApp


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("MultiClock")
    app.setOrganizationName("MultiClock")

    window = MultiClockApp()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
