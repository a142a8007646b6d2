"""Project version constants.

These constants are used in logs and in ``exportviews --version`` so that a
built export tree can be traced back to the tool that produced it.
"""

ENGINE_NAME: str = "exportviews"
ENGINE_VERSION: str = "0.1.0"
