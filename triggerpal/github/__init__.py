"""GitHub event parsing and trigger detection"""
