"""Memory grid game server.

Flask objects live in ``memorygrid.extensions`` and the application factory in
``memorygrid.factory`` so the game engine under ``memorygrid.services.memory``
can be imported without loading the web stack.
"""
