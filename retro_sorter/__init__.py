"""Sort archived retro games into a genre folder hierarchy using their NFO descriptors."""

__version__ = "0.1.0"
