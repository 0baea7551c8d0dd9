"""
URL rewriting applied before every fetch or cache lookup.
"""

import logging
from typing import Dict, Optional

from ..utils.config import DEFAULT_REWRITE_RULES


class UrlRewriter:
    """
    Applies an ordered table of literal substring replacements to URLs.

    Rules are applied in a single pass, in insertion order. A rule whose
    key is absent is a no-op. Rewriting never restarts from the first rule,
    so a replacement value that contains another rule's key is not
    rewritten again.
    """

    def __init__(self, rules: Optional[Dict[str, str]] = None):
        self.rules: Dict[str, str] = dict(DEFAULT_REWRITE_RULES if rules is None else rules)
        self.logger = logging.getLogger(__name__)

        if not self.is_stable():
            self.logger.warning(
                "Rewrite table is not idempotent: a replacement value contains a rule key"
            )

    def rewrite(self, url: str) -> str:
        """Rewrite a URL using the configured rules."""
        for key, value in self.rules.items():
            if key in url:
                url = url.replace(key, value)
        return url

    def is_stable(self) -> bool:
        """Check that no replacement value contains any rule key."""
        return not any(
            key in value
            for value in self.rules.values()
            for key in self.rules
        )
