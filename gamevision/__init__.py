"""
GameVision client data layer.

Layered the same way throughout:

  gamevision/repositories/   pure I/O: the per-user document tree and the
                              JSON file it is persisted to.
  gamevision/services/       business logic: profile/list/friend/message
                              operations, the game-detail cache, list sorting,
                              the social timeline and form/session state.
  gamevision/clients.py      REST clients for the game catalog and news APIs.

``GameVision`` (in ``gamevision/app.py``) is the integration point: it loads
the configuration, creates the clients, repository and service instances and
exposes them as public attributes (e.g. ``vision.library_service``).
"""

__version__ = '1.0.0'
