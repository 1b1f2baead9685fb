"""
termday — Entry Point.

`python main.py` prints the greeting, daily sentence, sun countdown and
upcoming events. See `python main.py -h` for the commands.
"""

from termday.cli.app import main

if __name__ == "__main__":
    main()
