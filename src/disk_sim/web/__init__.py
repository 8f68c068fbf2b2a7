"""Browser-facing JSON API for the simulator.

This package provides a Flask application that exposes the planner and
a simulator session over HTTP.  It is an **optional** extra — install
with::

    pip install disk-sim[web]

The ``create_app`` factory in ``app.py`` creates a session and serves:

- ``GET /api/algorithms`` — the algorithm catalog.
- ``POST /api/plan`` — compute a sequence from a JSON body.
- ``POST /api/execute`` — run a shell command against the session.
- ``GET /api/status`` — the current playback snapshot.
"""
