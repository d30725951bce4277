"""Reference Human Design chart engine.

Submodules are not imported here; callers load the pieces they need
(``interfaces``, ``modes``, ``ephemerides``, ``chart``, ``graph``).
"""

ENGINE_NAME = "hd-engine"
ENGINE_VERSION = "0.4.0"
