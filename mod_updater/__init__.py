"""
mod-updater: keeps a directory of mods, shaders and resource packs in sync
with a remote JSON manifest.
"""

__version__ = "1.2.0"
