"""Точка входа в приложение."""
import sys

from pelx.app import PelxApp


def main() -> None:
    """Разбирает аргументы командной строки и выполняет команду."""
    app = PelxApp()
    sys.exit(app.run())


if __name__ == "__main__":
    main()
