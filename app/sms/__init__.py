"""SMS scheduling and dispatch"""
