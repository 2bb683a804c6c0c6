"""Allow ``python -m chaoscli``."""

from chaoscli.cli import main

main()
