"""
Concept-to-candidate matching: factor scoring and weighted ranking.

Modules
-------
factors   : FactorScores dataclass + FactorScorer: five 0-100 sub-scores per
            (concept, candidate), pure functions over config and catalog tables.
composite : CompositeScorer: weighted overall score, min-score filter,
            (-score, name) ordering, top-N, descriptive annotations.
"""
