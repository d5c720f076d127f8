"""Local gateway and codec for Daikin DSIOT air conditioners."""

__version__ = "0.1.0"
