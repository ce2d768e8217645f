__app_name__ = "scribefix"
__version__ = "0.1.0"
