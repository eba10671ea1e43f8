"""
Strategy manager: runs the enabled base version strategies and selects one
candidate.
"""

import logging
from typing import Dict, List, Optional, Sequence

from .exceptions import InvalidConfiguredVersionError, StrategyFailureError
from .strategies import (
    PRIORITY_ORDER,
    STRATEGY_CLASSES,
    BaseVersionCandidate,
    BaseVersionStrategy,
    Strategy,
    VersionContext,
)

logger = logging.getLogger(__name__)


class StrategyManager:
    """
    Runs base version strategies in priority order and picks the base version.

    This class provides:
    - Fail-fast execution: the first strategy error aborts the run
    - An explicit Fallback when no strategy produced evidence
    - Selection of a single candidate (see find_best_base_version)
    """

    def __init__(self, strategies: Optional[Dict[Strategy, BaseVersionStrategy]] = None):
        if strategies is None:
            strategies = {
                strategy: strategy_class()
                for strategy, strategy_class in STRATEGY_CLASSES.items()
            }
        self.strategies = strategies

    def get_base_versions(self, context: VersionContext) -> List[BaseVersionCandidate]:
        """
        Collect candidates from every enabled strategy.

        Args:
            context: Inputs for this resolution

        Returns:
            All candidates, in strategy priority order

        Raises:
            InvalidConfiguredVersionError: If the next-version cannot be parsed
            StrategyFailureError: If any strategy fails
        """
        candidates: List[BaseVersionCandidate] = []
        enabled = set(context.strategies)

        for strategy_type in PRIORITY_ORDER:
            if strategy_type not in enabled:
                continue
            strategy = self.strategies.get(strategy_type)
            if strategy is None:
                continue
            candidates.extend(self._run(strategy, context))

        if not candidates:
            logger.debug("No strategy produced a base version, using Fallback")
            candidates.extend(self._run(self.strategies[Strategy.fallback], context))

        return candidates

    def _run(
        self, strategy: BaseVersionStrategy, context: VersionContext
    ) -> List[BaseVersionCandidate]:
        try:
            candidates = strategy.get_base_versions(context)
        except InvalidConfiguredVersionError:
            raise
        except Exception as e:
            raise StrategyFailureError(strategy.name, e) from e

        for candidate in candidates:
            logger.debug(f"  {strategy.name}: {candidate}")
        return candidates

    @staticmethod
    def find_best_base_version(
        candidates: Sequence[BaseVersionCandidate],
    ) -> Optional[BaseVersionCandidate]:
        """
        Select the base version.

        A configured next version is authoritative and wins outright.
        Otherwise the greatest version wins; on equal versions the one without
        a pre-release label is preferred, then the earlier candidate.

        Returns:
            The selected candidate, or None for an empty sequence
        """
        for candidate in candidates:
            if candidate.strategy == Strategy.configured_next_version:
                return candidate

        best: Optional[BaseVersionCandidate] = None
        for candidate in candidates:
            if best is None:
                best = candidate
                continue
            comparison = candidate.version.compare(best.version)
            if comparison > 0:
                best = candidate
            elif (
                comparison == 0
                and best.version.is_pre_release
                and not candidate.version.is_pre_release
            ):
                best = candidate
        return best
