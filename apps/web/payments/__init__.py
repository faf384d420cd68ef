"""Payments module - simulated eSewa and Khalti checkout."""
