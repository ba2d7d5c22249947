"""Execution limits for a single simulator run.

Editor text is untrusted and may loop forever, so every run carries a
`Limits` value. The defaults are large enough for any teaching example and
small enough to answer within a fraction of a second.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

MODES = ('normal', 'debug')


@dataclass(frozen=True)
class Limits:
    max_steps: int = 100_000
    max_iterations: int = 10_000
    max_call_depth: int = 64
    max_output_lines: int = 5_000

    def capped(self, settings: Optional[Dict[str, Any]]) -> 'Limits':
        """Apply client-requested limits without exceeding these ones.

        Unknown keys are ignored and missing keys keep the current value,
        so a host can forward a user's settings object unchanged.
        """
        if not settings:
            return self
        caps = {}
        for name in ('max_steps', 'max_iterations', 'max_call_depth', 'max_output_lines'):
            if name in settings:
                requested = int(settings[name])
                caps[name] = max(0, min(requested, getattr(self, name)))
        return replace(self, **caps)


DEFAULT_LIMITS = Limits()
