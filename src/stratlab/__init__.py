"""
Stratlab: strategy backtest job submission and trade ledger post-processing.
"""
