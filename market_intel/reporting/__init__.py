"""
market_intel.reporting: terminal formatting and file export.

Modules:
  formatters : ASCII formatters for match tables, portfolio summaries,
               diversification breakdowns and recommendations.
  export     : JSON / CSV writers for ranked matches and portfolio reports.
"""
