"""Main entry point: ``python -m search_sync``."""

from search_sync.cli.sync import sync


def main() -> None:
    """Run the sync command."""
    sync(prog_name="search-sync")


if __name__ == "__main__":
    main()
