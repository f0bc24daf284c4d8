"""Built-in CLI sub-command groups for reqconv.

* :mod:`~reqconv.commands.config` -- view and modify global settings.

The ``convert`` command itself lives in :mod:`reqconv.app`.
"""
