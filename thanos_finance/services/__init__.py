# services/__init__.py

"""Advice, advisor chat, reports and the trade simulator"""
