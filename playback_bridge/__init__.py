"""Playback Bridge API App"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("playback-bridge")
except PackageNotFoundError:
    __version__ = "dev"
