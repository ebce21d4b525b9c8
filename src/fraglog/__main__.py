"""
fraglog CLI Entry Point

Allows running the package as a module: python -m fraglog
"""


def main():
    """Main entry point for the CLI."""
    from fraglog.cli import app

    app()


if __name__ == "__main__":
    main()
