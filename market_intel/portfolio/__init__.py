"""
Portfolio analytics: diversification, health, recommendations and history.

Modules
-------
diversification : DiversificationAnalyzer: genre distribution + normalized
                  Shannon entropy over the canonical genre taxonomy.
health          : PortfolioHealthAggregator: blended 0-100 health score,
                  market position, strongest/weakest genre.
recommendations : RecommendationGenerator: ordered rule set, stable
                  priority sort, capped list.
engine          : PortfolioAnalyzer: runs the three stages in order and
                  returns a PortfolioReport.
history         : Append-only score history helpers (copy-on-write).
store           : JsonPortfolioStore: whole-collection JSON persistence.
"""
