"""
Displayed-balance animation.

After a confirmed transfer the displayed balance glides from its prior
value to the new confirmed value over a fixed duration, using the same
cubic-bezier curve as the mobile client. The final frame always lands
exactly on the target so the displayed and confirmed balances agree.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Awaitable, Callable

from finfusion.domain.wallet.entities import SessionContext

logger = logging.getLogger(__name__)

STANDARD_CURVE = (0.4, 0.0, 0.2, 1.0)
_BISECTION_STEPS = 40


class CubicBezier:
    """CSS-style cubic-bezier easing with endpoints fixed at (0,0) and (1,1)."""

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
            raise ValueError("Bezier x control points must lie in [0, 1]")
        self._x1, self._y1, self._x2, self._y2 = x1, y1, x2, y2

    @staticmethod
    def _coord(t: float, p1: float, p2: float) -> float:
        u = 1.0 - t
        return 3 * u * u * t * p1 + 3 * u * t * t * p2 + t ** 3

    def __call__(self, progress: float) -> float:
        if progress <= 0.0:
            return 0.0
        if progress >= 1.0:
            return 1.0
        # x(t) is monotonic for x control points in [0, 1]
        lo, hi = 0.0, 1.0
        for _ in range(_BISECTION_STEPS):
            mid = (lo + hi) / 2
            if self._coord(mid, self._x1, self._x2) < progress:
                lo = mid
            else:
                hi = mid
        return self._coord((lo + hi) / 2, self._y1, self._y2)


standard_easing = CubicBezier(*STANDARD_CURVE)

Sleeper = Callable[[float], Awaitable[None]]


def interpolate(start: Decimal, end: Decimal, eased: float) -> Decimal:
    """Return the balance at an eased fraction, quantized like ``end``."""
    value = start + (end - start) * Decimal(repr(eased))
    exponent = end.as_tuple().exponent
    if isinstance(exponent, int) and exponent < 0:
        return value.quantize(Decimal(1).scaleb(exponent))
    return value


class BalanceAnimator:
    """Steps ``SessionContext.displayed_balance`` toward the confirmed value.

    Args:
        duration_ms: Total animation time. Zero jumps straight to the target.
        frames: Number of intermediate updates.
        easing: Maps linear progress in [0, 1] to eased progress.
        sleep: Awaitable delay, injectable for tests.
    """

    def __init__(
        self,
        duration_ms: int = 1000,
        frames: int = 30,
        easing: Callable[[float], float] = standard_easing,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._duration_ms = max(duration_ms, 0)
        self._frames = max(frames, 1)
        self._easing = easing
        self._sleep = sleep

    async def animate(self, session: SessionContext) -> None:
        """Animate the displayed balance to the confirmed balance."""
        start = session.displayed_balance
        target = session.confirmed_balance
        if start == target:
            return

        if self._duration_ms == 0:
            session.show_balance(target)
            return

        logger.debug("Animating balance %s -> %s", start, target)
        frame_delay = self._duration_ms / 1000 / self._frames
        try:
            for frame in range(1, self._frames):
                session.show_balance(
                    interpolate(start, target, self._easing(frame / self._frames))
                )
                await self._sleep(frame_delay)
        finally:
            session.show_balance(session.confirmed_balance)
