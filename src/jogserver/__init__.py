"""jogserver -- Phone-browser jog control for a machine axis.

This package serves a tiny control page over HTTP so a phone can raise
or lower the active tool of a machine in small steps. Starting a new
instance replaces any instance already holding the port.
"""

__version__ = "0.2.1"
