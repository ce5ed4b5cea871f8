"""ripctl - reversible deletion for the command line.

Targets are moved into a graveyard instead of being unlinked, and a
record of every burial allows them to be restored later.
"""

__version__ = "0.3.0"
