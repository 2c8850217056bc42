"""Faculty schedule builder: weekly hours recording, totals and exports."""

__version__ = "0.1.0"
