"""Version information for the HTTP signature SDK"""

__version__ = "0.1.0"
