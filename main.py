"""Run the hexboard client from a source checkout: ``python main.py --remote http://catan.local``."""

from api.cli import main

if __name__ == "__main__":
    main()
