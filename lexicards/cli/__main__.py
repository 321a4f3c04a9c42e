"""Allow ``python -m lexicards.cli``."""

from lexicards.cli.main import main

main()
