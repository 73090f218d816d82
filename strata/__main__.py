"""
Strata Module Entry Point
==========================

Allows running the Strata CLI via: python -m strata
"""

from strata.cli import main

if __name__ == "__main__":
    main()
