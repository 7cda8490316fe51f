"""Browser-based read-only dashboard for a running simulation.

This package provides a Flask application that lets a browser watch a
simulation tick.  It is an **optional** extra — install with::

    pip install devlin[web]

The ``create_app`` factory in ``app.py`` builds a simulation and serves:

- ``GET /`` — the text dashboard for the latest tick.
- ``GET /api/snapshot`` — the latest tick snapshot as JSON.
- ``POST /api/tick`` — advance one or more ticks.
- ``GET /api/report`` — the metrics report so far.
- ``GET /api/log`` — the event log.
"""
