"""Built-in CLI sub-commands registered by :mod:`vimeokit.app`."""
