"""Launch the elevator bank scenario runner from a source checkout."""
from __future__ import annotations

from liftbank.scenario import main

if __name__ == "__main__":
    main()
