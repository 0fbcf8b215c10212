"""FeatureNode abstraction for FeatureWalker.

Nodes are produced and owned by the parser. The walker never looks inside
them; everything it needs is the traversal contract, accept(walker).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from .guard import unguarded_state


class FeatureNode(ABC):
    """Abstract base class for nodes of a parsed feature document.

    Composite nodes implement accept() by calling the walker's matching
    entry method once for each child, in document order. Leaf nodes
    implement it as a no-op.

    The walker only relies on a callable ``accept`` attribute, so nodes
    from other sources do not need to subclass this.
    """

    @abstractmethod
    def accept(self, walker: Any) -> None:
        """Drive traversal of this node's children through the walker.

        Args:
            walker: The FeatureWalker performing the walk
        """
        pass

    def __getstate__(self) -> Dict[str, Any]:
        """Instance state for copy and pickle, without any walker's guard."""
        return unguarded_state(self)

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return f"{self.__class__.__name__}()"

