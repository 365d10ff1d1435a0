"""Allow ``python -m addon_proxy``."""

from .app import main

main()
