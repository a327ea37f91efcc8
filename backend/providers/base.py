from typing import List

from models import SourceCandidate


class EvidenceProvider:
    """One way of finding web evidence for a claim.

    Providers return raw candidates; the retriever annotates and merges them.
    A provider that is not configured is skipped, never called.
    """
    name: str = "provider"

    @property
    def configured(self) -> bool:
        return True

    async def search(self, query: str, limit: int) -> List[SourceCandidate]:
        raise NotImplementedError
