"""Entry point for 'python -m warden' command."""

from warden.cli import main

if __name__ == "__main__":
    main()
