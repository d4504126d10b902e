"""
Entry point for running recall as a module.

Usage:
    python -m recall review
    python -m recall due
    python -m recall --help
"""
from .cli import main

if __name__ == "__main__":
    main()
