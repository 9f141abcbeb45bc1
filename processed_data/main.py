"""Console entry point: ``processed-data``."""

from processed_data.cli.main import main

if __name__ == "__main__":
    main()
