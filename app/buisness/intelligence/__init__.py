"""
Inventory intelligence domain logic

Demand aggregation, forecasting strategies, reorder checks and allocation
proposals. Engines receive an EngineContext and never read globals.
"""
