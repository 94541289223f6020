"""
Demo data for trying the CLI without a real portfolio.

Modules
-------
sample_portfolio : PortfolioGenerator protocol + SeededPortfolioGenerator
                   (eight sample concepts with reproducible score histories).

Only the ``seed-demo`` CLI command and tests import this package; nothing on
the scoring path does.
"""
