NAME = "loggerlink"
AUTHOR = "loggerlink developers"
__version__ = "0.1.0"
