import sys
from ui.main_window import GymApp

"""
Entry point for the Fitness Gym Management application.
Run this file to start the application.
"""


def main() -> int:
    app = GymApp(sys.argv)

    # Sets up the data folder, logging and the main window
    app.start()

    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
