"""Message transformation pipelines driven by a small scripting language.

Modules: ``message`` and ``jsonpath`` for message data, ``sublang`` for the
script parser, ``decoders``, ``fields`` and ``output`` for the transforms,
``pipeline`` and ``app`` for running them, and ``cli`` for the command.
"""

__version__ = "0.1.0"