from carservice.cli.app import main_menu
from carservice.db import dispose_engine, initialize_db
from carservice.logging import configure_logging, reconfigure


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()
    try:
        main_menu()
    finally:
        dispose_engine()


if __name__ == "__main__":
    main()
