"""
Valuation Lab service: HTTP API, CLI, market-quote connectors and the
scenario library around ``valuelab_engine``.
"""
