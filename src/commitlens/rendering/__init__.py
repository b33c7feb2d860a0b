"""Renderers for commit selections."""

from commitlens.rendering.base import CommitPredicate, Renderer
from commitlens.rendering.console import ConsoleRenderer

__all__ = ["CommitPredicate", "ConsoleRenderer", "Renderer"]
