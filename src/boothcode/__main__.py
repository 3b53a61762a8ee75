"""Entry point for 'python -m boothcode' command.

This module allows the BoothCode CLI to be invoked using
'python -m boothcode'.
"""

from boothcode.cli import main

if __name__ == "__main__":
    main()
