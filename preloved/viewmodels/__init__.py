"""ViewModel package for page state and command surfaces.

Call context:
    ``preloved/app/main.py`` and any UI front-end import concrete view models
    from this package and bind their callbacks (``on_changed``,
    ``on_navigate``, ``on_alert``) to the rendering layer.

Dependencies:
    Modules here depend on domain types, use-case callables and the
    formatting helpers in ``status_format``. I/O adapters stay outside.
"""
