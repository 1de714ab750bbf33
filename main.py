"""Start the NotesVault terminal client."""

from cli.client import main

if __name__ == "__main__":
    main()
