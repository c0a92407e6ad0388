"""
Purpose: Answer factual questions from an ordered chain of knowledge providers.
Why: The controller only sees one Resolution, whichever provider answered.

Chain rules:
- The first usable result stops the chain (status=answered).
- A failing step with a successor counts as empty and the chain moves on.
- A failing final step ends the chain with status=network_error.
- Every step cleanly empty ends the chain with status=not_found.

Generic lookups use [primary, secondary]. Limited lookups use the secondary
provider only and cut its extract to the requested number of sentences.

Testing: Fake providers returning results or raising ProviderError;
assert call counts and terminal status.
"""

from __future__ import annotations
from dataclasses import replace
from typing import Optional, Sequence

from .._logging import get_component_logger
from ..interfaces import KnowledgeProvider
from ..models import ProviderResult, Resolution, ResolutionStatus
from .providers import ProviderError

SENTENCE_DELIMITER = ". "


def truncate_sentences(text: str, line_limit: int) -> str:
    """
    Keep the first `line_limit` sentence-like units of `text`.
    Units are split on ". " and rejoined the same way, with a closing period
    added only when missing. A limit larger than the text returns it whole.
    """
    units = text.split(SENTENCE_DELIMITER)[: max(1, int(line_limit))]
    out = SENTENCE_DELIMITER.join(units).strip()
    if not out.endswith("."):
        out += "."
    return out


class KnowledgeResolver:
    def __init__(
        self,
        primary: KnowledgeProvider,
        secondary: KnowledgeProvider,
        *,
        logger=None,
    ):
        self.primary = primary
        self.secondary = secondary
        self.log = get_component_logger("KnowledgeResolver", logger)

    def _run_chain(self, steps: Sequence[KnowledgeProvider], topic: str) -> Resolution:
        for idx, provider in enumerate(steps):
            is_last = idx == len(steps) - 1
            try:
                result = provider.lookup(topic)
            except ProviderError as exc:
                self.log.warning(
                    "provider_failed",
                    provider=provider.name,
                    topic=topic,
                    error=str(exc),
                    fallback=not is_last,
                )
                if is_last:
                    return Resolution(ResolutionStatus.NETWORK_ERROR)
                continue

            if result.is_usable:
                self.log.info("provider_answered", provider=provider.name, topic=topic)
                return Resolution(ResolutionStatus.ANSWERED, result)
            self.log.info("provider_empty", provider=provider.name, topic=topic)

        return Resolution(ResolutionStatus.NOT_FOUND)

    def resolve_generic(self, topic: str) -> Resolution:
        """Primary first, secondary when the primary is empty or unreachable."""
        return self._run_chain([self.primary, self.secondary], topic)

    def resolve_limited(self, topic: str, line_limit: int) -> Resolution:
        """Secondary only; its extract is cut to `line_limit` sentences."""
        resolution = self._run_chain([self.secondary], topic)
        if not resolution.answered:
            return resolution

        result: Optional[ProviderResult] = resolution.result
        limited = truncate_sentences(result.extract, line_limit)
        return Resolution(ResolutionStatus.ANSWERED, replace(result, extract=limited))
