"""Configuration system for FeatureWalker.

This module defines how users specify the behaviour of a walk: how
foreign traversal attempts are handled, how long competing threads may
wait for a busy walker, and the free-form options handed to observers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any, Dict, List


class ForeignTraversalMode(Enum):
    """What happens when something other than the walker calls accept().

    A legacy observer that reaches into a notified node and traverses it
    itself would walk the same subtree twice. The mode decides how such
    an attempt is answered.
    """
    REJECT = "reject"     # Raise ForeignTraversalError
    PARK = "park"         # Block the calling thread until resumed
    RECORD = "record"     # Record a report and return without traversing
    CUSTOM = "custom"     # User-supplied policy


@dataclass
class WalkerConfig:
    """Complete configuration for a FeatureWalker.

    One config is bound to one walker for its whole lifetime.
    """

    # Foreign traversal handling
    foreign_traversal: ForeignTraversalMode = ForeignTraversalMode.REJECT
    custom_policy: Optional[Any] = None       # Custom policy instance
    park_timeout: Optional[float] = None      # None = park until resumed

    # Competing entry from another thread
    ownership_timeout: float = 0.0            # 0 = fail immediately

    # Reporting
    quiet: bool = False                       # Suppress deprecation warnings
    verbose: bool = True                      # Log each recorded foreign attempt

    # Free-form options, exposed as FeatureWalker.options
    options: Dict[str, Any] = field(default_factory=dict)

    # Convenience constructors for common configurations

    @classmethod
    def legacy(cls) -> 'WalkerConfig':
        """Create config reproducing the classic runner.

        Foreign callers are parked with no timeout and no warning is
        logged, so legacy observers keep working unmodified.

        Returns:
            WalkerConfig that parks foreign callers
        """
        return cls(
            foreign_traversal=ForeignTraversalMode.PARK,
            park_timeout=None,
            quiet=True
        )

    @classmethod
    def strict(cls) -> 'WalkerConfig':
        """Create config that rejects foreign traversal loudly.

        Returns:
            WalkerConfig that raises on foreign traversal
        """
        return cls(
            foreign_traversal=ForeignTraversalMode.REJECT,
            quiet=False
        )

    @classmethod
    def lenient(cls) -> 'WalkerConfig':
        """Create config that silently records foreign traversal attempts.

        Returns:
            WalkerConfig that records and skips foreign traversal
        """
        return cls(
            foreign_traversal=ForeignTraversalMode.RECORD,
            quiet=True,
            verbose=False
        )

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        from .core.guard import ForeignTraversalPolicy

        errors = []

        if not isinstance(self.foreign_traversal, ForeignTraversalMode):
            errors.append(f"unknown foreign_traversal mode: {self.foreign_traversal!r}")

        # Check timeouts
        if self.park_timeout is not None and self.park_timeout < 0:
            errors.append("park_timeout cannot be negative")

        if self.ownership_timeout is None or self.ownership_timeout < 0:
            errors.append("ownership_timeout must be zero or positive")

        # Check custom components
        if self.foreign_traversal == ForeignTraversalMode.CUSTOM and self.custom_policy is None:
            errors.append("custom_policy required when foreign_traversal is CUSTOM")

        if self.custom_policy is not None and not isinstance(self.custom_policy, ForeignTraversalPolicy):
            errors.append("custom_policy must be a ForeignTraversalPolicy")

        if not isinstance(self.options, dict):
            errors.append("options must be a dict")

        return errors
