"""Command-line interface."""
from geomdemos.main import main

if __name__ == "__main__":
    main()
