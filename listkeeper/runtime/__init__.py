"""Runtime wiring: builds the object graph from settings."""

from listkeeper.runtime.bootstrap import Runtime, build_runtime

__all__ = ["Runtime", "build_runtime"]
