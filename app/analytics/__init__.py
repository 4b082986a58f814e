"""Visitor analytics read from the GA4 Data API"""
