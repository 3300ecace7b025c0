"""
Domain layer for the Inventory Intelligence Engine.
Contains forecasting, replenishment and allocation logic
separated from data persistence concerns.
"""
