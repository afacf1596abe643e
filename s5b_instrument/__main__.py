"""Package entry point for ``python -m s5b_instrument``."""

from s5b_instrument.cli import main

if __name__ == "__main__":
    main()
