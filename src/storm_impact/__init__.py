"""
Storm Impact Report.

A small, reproducible analysis of the NOAA Storm Events database that ranks
weather event categories by their toll on population health (fatalities and
injuries) and by their economic consequences (property and crop damage), and
maps where the most harmful categories hit hardest across the United States.
"""

__version__ = "0.1.0"
