"""
Keyword clustering by sentence-level co-occurrence.
"""
from typing import List

import numpy as np

from core.config import MAX_CLUSTER_KEYWORDS, MAX_CLUSTER_SIZE, MIN_COOCCURRENCE
from services.processing.utils import split_sentences

MIN_SENTENCE_LENGTH = 10
MIN_CLUSTER_SIZE = 2


class TopicClusterer:
    """Greedy co-occurrence clustering of a keyword set."""

    def __init__(
        self,
        max_keywords: int = MAX_CLUSTER_KEYWORDS,
        max_cluster_size: int = MAX_CLUSTER_SIZE,
        min_cooccurrence: int = MIN_COOCCURRENCE,
    ):
        self.max_keywords = max_keywords
        self.max_cluster_size = max_cluster_size
        self.min_cooccurrence = min_cooccurrence

    def cluster(self, text: str, keywords: List[str]) -> List[List[str]]:
        """
        Group keywords that appear in the same sentences.

        Algorithm:
            1. Count per-keyword sentence frequency and pairwise co-occurrence
            2. Seed clusters with the most frequent unassigned keyword
            3. Absorb its strongest unassigned neighbors (ties by keyword order)
            4. Order clusters by total member frequency
            5. Collect singletons into a trailing miscellaneous cluster
        """
        keywords = [kw for kw in dict.fromkeys(keywords) if kw][:self.max_keywords]
        if len(keywords) < 2:
            return [keywords] if keywords else []

        freq, cooccurrence = self._count(text, keywords)

        # Stable sort keeps keyword order among equal frequencies
        seeds = sorted(range(len(keywords)), key=lambda i: -freq[i])

        assigned = set()
        clusters: List[List[int]] = []
        for seed in seeds:
            if seed in assigned:
                continue

            cluster = [seed]
            assigned.add(seed)

            neighbors = sorted(
                (j for j in range(len(keywords)) if cooccurrence[seed, j] >= self.min_cooccurrence),
                key=lambda j: -cooccurrence[seed, j],
            )
            for neighbor in neighbors:
                if len(cluster) >= self.max_cluster_size:
                    break
                if neighbor not in assigned:
                    cluster.append(neighbor)
                    assigned.add(neighbor)

            clusters.append(cluster)

        clusters.sort(key=lambda members: -int(freq[members].sum()))

        grouped = [c for c in clusters if len(c) >= MIN_CLUSTER_SIZE]
        singletons = [i for c in clusters if len(c) < MIN_CLUSTER_SIZE for i in c]
        if singletons:
            grouped.append(singletons)

        return [[keywords[i] for i in c] for c in grouped]

    @staticmethod
    def _count(text: str, keywords: List[str]):
        size = len(keywords)
        freq = np.zeros(size, dtype=np.int64)
        cooccurrence = np.zeros((size, size), dtype=np.int64)
        lowered = [kw.lower() for kw in keywords]

        for sentence in split_sentences(text.lower(), min_length=MIN_SENTENCE_LENGTH):
            present = np.array([kw in sentence for kw in lowered], dtype=bool)
            if not present.any():
                continue
            freq += present
            cooccurrence += np.outer(present, present)

        np.fill_diagonal(cooccurrence, 0)
        return freq, cooccurrence


topic_clusterer = TopicClusterer()


def cluster_topics(text: str, keywords: List[str]) -> List[List[str]]:
    return topic_clusterer.cluster(text, keywords)
