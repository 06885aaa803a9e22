"""
Cache package for the Articles Service.

Full records live under ``article:<slug>`` and the list view under
``articles-summary``. The store offers no multi-key transaction, so writes
report per-key outcomes rather than pretending to be atomic.
"""
